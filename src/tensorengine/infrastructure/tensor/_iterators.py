"""
Offset iterators over tensor headers.

Iterators encode a traversal order over one header as a finite sequence of
linear offsets. They are stateful and single-pass: stepping with ``next()``
or draining with `offsets()` consumes them until `reset()` is called.

- `FlatIterator`       : dense layouts (shape, element strides, offset).
                         Zero strides encode broadcast dimensions.
- `FlatSparseIterator` : every logical position of a sparse 2-D tensor in
                         row-major order, yielding an index into the nonzero
                         values or `SPARSE_ZERO` for implicit zeros.

Offsets are materialised lazily, on first use, as a NumPy ``intp`` array.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

SPARSE_ZERO = -1
"""Offset yielded by sparse iterators at positions without a stored value."""


class _OffsetIterator:
    """Shared cursor logic over a lazily computed offset array."""

    def __init__(self) -> None:
        self._offsets: Optional[np.ndarray] = None
        self._pos = 0

    def _compute(self) -> np.ndarray:
        raise NotImplementedError

    def _materialize(self) -> np.ndarray:
        if self._offsets is None:
            self._offsets = self._compute()
        return self._offsets

    def __iter__(self):
        return self

    def __next__(self) -> int:
        offs = self._materialize()
        if self._pos >= offs.shape[0]:
            raise StopIteration
        v = int(offs[self._pos])
        self._pos += 1
        return v

    def __len__(self) -> int:
        return int(self._materialize().shape[0])

    @property
    def done(self) -> bool:
        return self._pos >= len(self)

    def reset(self) -> None:
        self._pos = 0

    def offsets(self) -> np.ndarray:
        """
        Return every remaining offset and exhaust the iterator.

        Returns
        -------
        np.ndarray
            1-D ``intp`` array (a fresh copy; callers may modify it).
        """
        offs = self._materialize()
        rest = offs[self._pos :].copy()
        self._pos = offs.shape[0]
        return rest


class FlatIterator(_OffsetIterator):
    """
    Row-major iterator over a strided dense layout.

    Parameters
    ----------
    shape : Sequence[int]
        Logical shape.
    strides : Sequence[int]
        Element strides per dimension (0 for broadcast dimensions).
    offset : int, optional
        Element offset of the first logical element. Defaults to 0.

    Examples
    --------
    Transposed view of a 2x3 buffer::

        >>> list(FlatIterator((3, 2), (1, 3)))
        [0, 3, 1, 4, 2, 5]
    """

    def __init__(
        self, shape: Sequence[int], strides: Sequence[int], offset: int = 0
    ) -> None:
        super().__init__()
        if len(shape) != len(strides):
            raise ValueError(
                f"shape/strides rank mismatch: {tuple(shape)} vs {tuple(strides)}"
            )
        self.shape = tuple(int(d) for d in shape)
        self.strides = tuple(int(s) for s in strides)
        self.offset = int(offset)

    def _compute(self) -> np.ndarray:
        offs = np.asarray(self.offset, dtype=np.intp)
        for n, s in zip(self.shape, self.strides):
            offs = offs[..., None] + np.arange(n, dtype=np.intp) * s
        return offs.reshape(-1)

    def __repr__(self) -> str:
        return (
            f"FlatIterator(shape={self.shape}, strides={self.strides}, "
            f"offset={self.offset})"
        )


class FlatSparseIterator(_OffsetIterator):
    """
    Row-major iterator over all logical positions of a sparse tensor.

    Parameters
    ----------
    shape : tuple[int, int]
        Logical 2-D shape.
    rows, cols : np.ndarray
        Coordinates of the stored values, in header order (entry ``k`` of
        each array locates ``data[k]``).

    Notes
    -----
    The iterator yields ``shape[0] * shape[1]`` offsets. Position ``p`` in
    row-major order yields ``k`` if ``data[k]`` is stored there, otherwise
    `SPARSE_ZERO`. Duplicate coordinates resolve to the last stored entry.
    """

    def __init__(self, shape: Sequence[int], rows: np.ndarray, cols: np.ndarray):
        super().__init__()
        if len(shape) != 2:
            raise ValueError(f"sparse iterator requires a 2-D shape, got {shape!r}")
        self.shape = (int(shape[0]), int(shape[1]))
        self._rows = np.asarray(rows, dtype=np.intp)
        self._cols = np.asarray(cols, dtype=np.intp)

    def _compute(self) -> np.ndarray:
        n_rows, n_cols = self.shape
        offs = np.full(n_rows * n_cols, SPARSE_ZERO, dtype=np.intp)
        linear = self._rows * n_cols + self._cols
        offs[linear] = np.arange(linear.shape[0], dtype=np.intp)
        return offs

    @property
    def nnz(self) -> int:
        return int(self._rows.shape[0])

    def __repr__(self) -> str:
        return f"FlatSparseIterator(shape={self.shape}, nnz={self.nnz})"
