"""
Dense tensor implementation (NumPy host buffer).

A `DenseTensor` is a view over a 1-D backing buffer described by a logical
shape, per-dimension element strides and an element offset. Views created by
`transpose` and `broadcast_to` share the buffer of the tensor they were
derived from and are generally non-contiguous, which forces the dispatch
engine onto its iterator path.

Tensors placed on a non-CPU device are descriptors only: they hold no host
buffer and report `is_natively_accessible() == False`. Any attempt to read
their storage raises `InaccessibleDataError`.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from ...domain._device import Device
from ...domain._dtype import Dtype
from ...domain._errors import InaccessibleDataError
from ...domain._shape import Shape, normalize_shape, row_major_strides, total_size
from ...domain._tensor import TensorKind
from ._header import Header
from ._iterators import FlatIterator
from .mixins import TensorMixinArithmetic


class DenseTensor(TensorMixinArithmetic):
    """
    Dense n-dimensional tensor backed by a flat NumPy buffer.

    Parameters
    ----------
    shape : Sequence[int]
        Logical shape.
    device : Device, optional
        Placement. Defaults to ``Device("cpu")``.
    dtype : np.dtype, optional
        Element type. Defaults to ``np.float32``.

    Notes
    -----
    - CPU tensors are zero-initialised and contiguous on construction.
    - `hdr()` exposes the *whole* backing buffer, not only the elements
      reachable through this view; use `iterator()` to walk the view.
    """

    def __init__(
        self,
        shape: Sequence[int],
        device: Optional[Device] = None,
        *,
        dtype: Any = np.float32,
    ) -> None:
        self._shape: Shape = normalize_shape(shape)
        self._device = Device("cpu") if device is None else device
        if not isinstance(self._device, Device):
            raise ValueError(
                f"Unsupported device type: {type(self._device)!r} value={self._device!r}"
            )
        self._dtype = Dtype(np.dtype(dtype))
        self._strides: Shape = row_major_strides(self._shape)
        self._offset = 0
        self._buf: Optional[np.ndarray] = None
        if self._device.is_natively_accessible():
            self._buf = np.zeros(total_size(self._shape), dtype=self._dtype.type)

    # ----------------------------
    # Factories
    # ----------------------------
    @classmethod
    def from_numpy(
        cls, arr: Any, *, dtype: Any = None, device: Optional[Device] = None
    ) -> "DenseTensor":
        """
        Create a contiguous CPU tensor holding a copy of `arr`.

        Parameters
        ----------
        arr : array_like
            Source values.
        dtype : np.dtype, optional
            Element type; defaults to the dtype of `arr`.
        """
        a = np.array(arr, dtype=dtype, copy=True)
        t = cls(a.shape, device, dtype=a.dtype)
        if t._buf is None:
            raise InaccessibleDataError(t)
        t._buf[:] = a.reshape(-1)
        return t

    @classmethod
    def zeros(cls, shape: Sequence[int], *, dtype: Any = np.float32) -> "DenseTensor":
        return cls(shape, dtype=dtype)

    @classmethod
    def full(
        cls, shape: Sequence[int], value: Any, *, dtype: Any = np.float32
    ) -> "DenseTensor":
        t = cls(shape, dtype=dtype)
        t.fill(value)
        return t

    @classmethod
    def _view(
        cls,
        base: "DenseTensor",
        shape: Sequence[int],
        strides: Sequence[int],
        offset: int,
    ) -> "DenseTensor":
        """Create a tensor sharing `base`'s buffer with a new layout."""
        t = cls.__new__(cls)
        t._shape = tuple(int(d) for d in shape)
        t._strides = tuple(int(s) for s in strides)
        t._offset = int(offset)
        t._device = base._device
        t._dtype = base._dtype
        t._buf = base._buf
        return t

    # ----------------------------
    # Capability surface
    # ----------------------------
    @property
    def kind(self) -> TensorKind:
        return TensorKind.DENSE

    @property
    def dtype(self) -> Dtype:
        return self._dtype

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def strides(self) -> Shape:
        """Element (not byte) strides per dimension."""
        return self._strides

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def device(self) -> Device:
        return self._device

    def numel(self) -> int:
        return total_size(self._shape)

    def is_natively_accessible(self) -> bool:
        return self._buf is not None and self._device.is_natively_accessible()

    def is_contiguous(self) -> bool:
        """
        Check whether the view is the whole buffer in row-major order.

        Returns
        -------
        bool
            True if strides are row-major, the offset is zero and the buffer
            holds exactly `numel()` elements.
        """
        if self._buf is None:
            return True
        return (
            self._offset == 0
            and self._strides == row_major_strides(self._shape)
            and self._buf.shape[0] == self.numel()
        )

    def _require_buffer(self) -> np.ndarray:
        if not self.is_natively_accessible():
            raise InaccessibleDataError(self)
        return self._buf

    def hdr(self) -> Header:
        """
        Return a header over the backing buffer.

        Raises
        ------
        InaccessibleDataError
            If the tensor is not natively accessible.
        """
        return Header(self._require_buffer())

    def iterator(self) -> FlatIterator:
        """Return a fresh row-major iterator over this view's offsets."""
        return FlatIterator(self._shape, self._strides, self._offset)

    def clone(self) -> "DenseTensor":
        """
        Return a contiguous copy with the same shape, dtype and device.

        The copy owns a new buffer holding this view's values in row-major
        order, so it is always contiguous even when `self` is a view.
        """
        out = type(self)(self._shape, self._device, dtype=self._dtype.type)
        if self._buf is not None:
            out._buf[:] = self._buf[self.iterator().offsets()]
        return out

    # ----------------------------
    # Layout views
    # ----------------------------
    def transpose(self, axes: Optional[Sequence[int]] = None) -> "DenseTensor":
        """
        Return a view with permuted dimensions (reversed by default).

        The view shares this tensor's buffer.
        """
        ndim = len(self._shape)
        axes = tuple(range(ndim))[::-1] if axes is None else tuple(axes)
        if sorted(axes) != list(range(ndim)):
            raise ValueError(f"Invalid axes {axes!r} for tensor of rank {ndim}")
        return type(self)._view(
            self,
            [self._shape[a] for a in axes],
            [self._strides[a] for a in axes],
            self._offset,
        )

    @property
    def T(self) -> "DenseTensor":
        return self.transpose()

    def broadcast_to(self, shape: Sequence[int]) -> "DenseTensor":
        """
        Return a read-mostly view broadcasting this tensor to `shape`.

        Broadcast dimensions get stride 0, so several logical positions alias
        one buffer element.

        Raises
        ------
        ValueError
            If the shapes are not broadcast-compatible.
        """
        target = normalize_shape(shape)
        if len(target) < len(self._shape):
            raise ValueError(f"Cannot broadcast {self._shape} to {target}")
        lead = len(target) - len(self._shape)
        strides = [0] * lead
        for src_d, src_s, dst_d in zip(self._shape, self._strides, target[lead:]):
            if src_d == dst_d:
                strides.append(src_s)
            elif src_d == 1:
                strides.append(0)
            else:
                raise ValueError(f"Cannot broadcast {self._shape} to {target}")
        return type(self)._view(self, target, strides, self._offset)

    # ----------------------------
    # Host interop
    # ----------------------------
    def to_numpy(self) -> np.ndarray:
        """
        Return this view's values as a new C-contiguous ndarray.

        Raises
        ------
        InaccessibleDataError
            If the tensor is not natively accessible.
        """
        buf = self._require_buffer()
        return buf[self.iterator().offsets()].reshape(self._shape)

    def copy_from_numpy(self, arr: Any) -> None:
        """
        Write `arr` into this view's logical positions.

        Raises
        ------
        ValueError
            If the shape of `arr` differs from this tensor's shape.
        """
        buf = self._require_buffer()
        a = np.asarray(arr)
        if a.shape != self._shape:
            raise ValueError(f"Shape mismatch: {a.shape} vs {self._shape}")
        buf[self.iterator().offsets()] = a.reshape(-1)

    def fill(self, value: Any) -> None:
        buf = self._require_buffer()
        buf[self.iterator().offsets()] = value

    def __repr__(self) -> str:
        layout = "contiguous" if self.is_contiguous() else "strided"
        return (
            f"DenseTensor(shape={self._shape}, device={self._device}, "
            f"dtype={self._dtype}, {layout})"
        )
