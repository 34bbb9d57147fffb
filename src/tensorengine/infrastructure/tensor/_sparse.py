"""
Compressed sparse 2-D tensor (CSR / CSC).

`CSTensor` stores only explicitly set entries: a `data` array of values, an
`indices` array of minor-axis coordinates and an `indptr` array delimiting
each major-axis slice. In CSR the major axis is rows; in CSC it is columns.

The dispatch engine only relies on two capabilities:

- `hdr()`      : a header over `data` (the stored values)
- `iterator()` : a `FlatSparseIterator` walking every logical position in
                 row-major order, independent of CSR/CSC storage order
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from ...domain._device import Device
from ...domain._dtype import Dtype
from ...domain._errors import InaccessibleDataError
from ...domain._shape import Shape, normalize_shape, total_size
from ...domain._tensor import TensorKind
from ._dense import DenseTensor
from ._header import Header
from ._iterators import FlatSparseIterator


class CSTensor:
    """
    Compressed sparse tensor.

    Parameters
    ----------
    shape : Sequence[int]
        Logical 2-D shape ``(n_rows, n_cols)``.
    indptr : array_like
        Major-axis slice boundaries, length ``n_major + 1``.
    indices : array_like
        Minor-axis coordinates of the stored values.
    data : array_like
        Stored values.
    is_csr : bool, optional
        Row-compressed (True, default) or column-compressed (False).
    device : Device, optional
        Placement. Defaults to ``Device("cpu")``.

    Raises
    ------
    ValueError
        If the index arrays are inconsistent with `shape`.
    """

    def __init__(
        self,
        shape: Sequence[int],
        indptr: Any,
        indices: Any,
        data: Any,
        *,
        is_csr: bool = True,
        device: Optional[Device] = None,
    ) -> None:
        self._shape: Shape = normalize_shape(shape)
        if len(self._shape) != 2:
            raise ValueError(f"CSTensor requires a 2-D shape, got {self._shape}")
        self._indptr = np.ascontiguousarray(indptr, dtype=np.intp)
        self._indices = np.ascontiguousarray(indices, dtype=np.intp)
        self._data = np.array(data, copy=True).reshape(-1)
        self._is_csr = bool(is_csr)
        self._device = Device("cpu") if device is None else device
        self._validate()

    def _validate(self) -> None:
        n_major, n_minor = self._shape if self._is_csr else self._shape[::-1]
        if self._indptr.shape != (n_major + 1,):
            raise ValueError(
                f"indptr must have length {n_major + 1}, got {self._indptr.shape[0]}"
            )
        if self._indptr[0] != 0 or np.any(np.diff(self._indptr) < 0):
            raise ValueError("indptr must start at 0 and be non-decreasing")
        nnz = int(self._indptr[-1])
        if self._indices.shape[0] != nnz or self._data.shape[0] != nnz:
            raise ValueError(
                f"indices/data must hold {nnz} entries, got "
                f"{self._indices.shape[0]}/{self._data.shape[0]}"
            )
        if nnz and (self._indices.min() < 0 or self._indices.max() >= n_minor):
            raise ValueError("sparse indices out of range")

    # ----------------------------
    # Factories
    # ----------------------------
    @classmethod
    def from_numpy(cls, arr: Any, *, is_csr: bool = True) -> "CSTensor":
        """
        Compress a dense 2-D array, storing its nonzero entries.

        Parameters
        ----------
        arr : array_like
            2-D source values.
        is_csr : bool, optional
            Storage order of the result.
        """
        a = np.asarray(arr)
        if a.ndim != 2:
            raise ValueError(f"CSTensor requires a 2-D array, got ndim={a.ndim}")
        major = a if is_csr else a.T
        rows, cols = np.nonzero(major)
        counts = np.bincount(rows, minlength=major.shape[0])
        indptr = np.concatenate(([0], np.cumsum(counts)))
        return cls(a.shape, indptr, cols, major[rows, cols], is_csr=is_csr)

    @classmethod
    def from_dense(cls, t: DenseTensor, *, is_csr: bool = True) -> "CSTensor":
        return cls.from_numpy(t.to_numpy(), is_csr=is_csr)

    # ----------------------------
    # Capability surface
    # ----------------------------
    @property
    def kind(self) -> TensorKind:
        return TensorKind.SPARSE

    @property
    def dtype(self) -> Dtype:
        return Dtype(self._data.dtype)

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def device(self) -> Device:
        return self._device

    @property
    def is_csr(self) -> bool:
        return self._is_csr

    @property
    def nnz(self) -> int:
        return int(self._data.shape[0])

    @property
    def indptr(self) -> np.ndarray:
        return self._indptr

    @property
    def indices(self) -> np.ndarray:
        return self._indices

    def numel(self) -> int:
        return total_size(self._shape)

    def is_natively_accessible(self) -> bool:
        return self._device.is_natively_accessible()

    def hdr(self) -> Header:
        """Return a header over the stored values."""
        if not self.is_natively_accessible():
            raise InaccessibleDataError(self)
        return Header(self._data)

    def coords(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Return ``(rows, cols)`` of every stored value, in header order.
        """
        major = np.repeat(
            np.arange(self._indptr.shape[0] - 1, dtype=np.intp), np.diff(self._indptr)
        )
        if self._is_csr:
            return major, self._indices
        return self._indices, major

    def iterator(self) -> FlatSparseIterator:
        rows, cols = self.coords()
        return FlatSparseIterator(self._shape, rows, cols)

    def clone(self) -> "CSTensor":
        return type(self)(
            self._shape,
            self._indptr.copy(),
            self._indices.copy(),
            self._data.copy(),
            is_csr=self._is_csr,
            device=self._device,
        )

    def to_numpy(self) -> np.ndarray:
        if not self.is_natively_accessible():
            raise InaccessibleDataError(self)
        out = np.zeros(self._shape, dtype=self._data.dtype)
        rows, cols = self.coords()
        out[rows, cols] = self._data
        return out

    def to_dense(self) -> DenseTensor:
        return DenseTensor.from_numpy(self.to_numpy())

    # ----------------------------
    # Operators
    # ----------------------------
    def __add__(self, other: Any) -> Any:
        from ... import api

        return api.add(self, other)

    def __mul__(self, other: Any) -> Any:
        from ... import api

        return api.mul(self, other)

    def __repr__(self) -> str:
        fmt = "csr" if self._is_csr else "csc"
        return (
            f"CSTensor(shape={self._shape}, nnz={self.nnz}, format={fmt}, "
            f"dtype={self.dtype})"
        )
