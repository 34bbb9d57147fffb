"""Small shape helpers shared by tensors and the dispatch engine."""

from __future__ import annotations

from typing import Sequence

Shape = tuple[int, ...]


def normalize_shape(shape: Sequence[int]) -> Shape:
    """
    Convert a shape-like sequence into a tuple of non-negative ints.

    Raises
    ------
    ValueError
        If any dimension is negative.
    TypeError
        If any dimension is not an integer.
    """
    out = []
    for d in shape:
        if isinstance(d, bool) or not hasattr(d, "__index__"):
            raise TypeError(f"Shape dimensions must be integers, got {d!r}")
        d = int(d.__index__())
        if d < 0:
            raise ValueError(f"Shape dimensions must be non-negative, got {shape!r}")
        out.append(d)
    return tuple(out)


def total_size(shape: Sequence[int]) -> int:
    """Return the number of elements described by `shape` (1 for scalars)."""
    n = 1
    for d in shape:
        n *= int(d)
    return n


def row_major_strides(shape: Sequence[int]) -> Shape:
    """
    Return element strides of a C-contiguous layout for `shape`.

    Examples
    --------
    >>> row_major_strides((2, 3, 4))
    (12, 4, 1)
    """
    strides = [1] * len(shape)
    acc = 1
    for i in range(len(shape) - 1, -1, -1):
        strides[i] = acc
        acc *= int(shape[i])
    return tuple(strides)
