"""
Raw buffer headers.

A `Header` is the unit handed to compute kernels: the element type, a 1-D
contiguous NumPy view over a tensor's backing buffer, and its length. The
view shares memory with the tensor, so kernels writing through a header
mutate the tensor that produced it.
"""

from __future__ import annotations

import numpy as np

from ...domain._dtype import Dtype


class Header:
    """
    (dtype, buffer, length) view over a contiguous backing buffer.

    Parameters
    ----------
    data : np.ndarray
        1-D C-contiguous array. No copy is made.

    Raises
    ------
    ValueError
        If `data` is not a 1-D contiguous array.
    """

    __slots__ = ("_data", "_dtype")

    def __init__(self, data: np.ndarray) -> None:
        if not isinstance(data, np.ndarray) or data.ndim != 1:
            raise ValueError("Header requires a 1-D numpy array")
        if not data.flags.c_contiguous:
            raise ValueError("Header requires a contiguous buffer")
        self._data = data
        self._dtype = Dtype(data.dtype)

    @classmethod
    def from_scalar(cls, value, dtype) -> "Header":
        """Build a one-element header holding `value` cast to `dtype`."""
        return cls(np.array([value], dtype=np.dtype(dtype)))

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def dtype(self) -> Dtype:
        return self._dtype

    @property
    def length(self) -> int:
        return int(self._data.shape[0])

    @property
    def ptr(self) -> int:
        """Address of the first element (``uintptr_t`` as a Python int)."""
        return int(self._data.ctypes.data)

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        return f"Header(dtype={self._dtype}, length={self.length}, ptr=0x{self.ptr:x})"


def copy_header(dst: Header, src: Header) -> int:
    """
    Copy raw elements from `src` into `dst`.

    Copies ``min(dst.length, src.length)`` elements in buffer order, casting
    to the destination element type.

    Returns
    -------
    int
        Number of elements copied.
    """
    n = min(dst.length, src.length)
    dst.data[:n] = src.data[:n]
    return n


def copy_header_iter(dst: Header, src: Header, dst_it, src_it) -> int:
    """
    Copy elements from `src` into `dst` following two iterators in lockstep.

    Used when source and destination layouts differ (strided or broadcast
    views): element ``k`` of the traversal is read from ``src[src_it[k]]``
    and written to ``dst[dst_it[k]]``. Both iterators are consumed.

    Returns
    -------
    int
        Number of elements copied.

    Raises
    ------
    ValueError
        If the iterators have different lengths.
    """
    di = dst_it.offsets()
    si = src_it.offsets()
    if di.shape[0] != si.shape[0]:
        raise ValueError(
            f"iterator length mismatch: dst={di.shape[0]} vs src={si.shape[0]}"
        )
    dst.data[di] = src.data[si]
    return int(di.shape[0])
