"""
Tensor interface definitions.

This module defines the capability surface the dispatch engine consumes from
tensors, using structural typing:

- `ITensor`       : dtype, shape, device, native-accessibility, clone, header
- `IDenseTensor`  : adds the contiguity flag and a strided/broadcast iterator
- `ISparseTensor` : adds a flattening iterator over nonzero entries

Operand representation is a closed variant, `TensorKind`. Concrete tensors
report their variant through the ``kind`` property; the dispatcher routes on
the pair of kinds instead of inspecting concrete classes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, runtime_checkable

from ._device import Device
from ._dtype import Dtype
from ._shape import Shape


class TensorKind(Enum):
    """
    Operand representation.

    Attributes
    ----------
    DENSE : TensorKind
        Contiguous or regularly strided flat buffer.
    SPARSE : TensorKind
        Nonzero entries plus index metadata.
    """

    DENSE = "dense"
    SPARSE = "sparse"


@runtime_checkable
class IHeader(Protocol):
    """Raw (element-type, pointer-like, length) view over a backing buffer."""

    @property
    def dtype(self) -> Dtype: ...

    @property
    def length(self) -> int: ...

    @property
    def ptr(self) -> int: ...


@runtime_checkable
class IIterator(Protocol):
    """
    Stateful, single-pass, restartable producer of linear offsets.

    An iterator encodes a traversal order (strides, broadcast, sparse layout)
    over one header. Compute kernels either step it with ``next()`` or drain
    it at once with `offsets()`; both consume the iterator until `reset()`.
    """

    def __iter__(self) -> "IIterator": ...

    def __next__(self) -> int: ...

    def __len__(self) -> int: ...

    @property
    def done(self) -> bool: ...

    def reset(self) -> None: ...

    def offsets(self) -> Any:
        """Return all remaining offsets as an integer array and exhaust."""
        ...


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor capability surface consumed by the dispatch engine.

    Notes
    -----
    - Tensors are caller-owned. The engine borrows headers and iterators for
      the duration of a single call and never stores them.
    - `hdr()` must only be called once `is_natively_accessible()` is True.
    """

    @property
    def kind(self) -> TensorKind: ...

    @property
    def dtype(self) -> Dtype: ...

    @property
    def shape(self) -> Shape: ...

    @property
    def device(self) -> Device: ...

    def is_natively_accessible(self) -> bool: ...

    def clone(self) -> "ITensor": ...

    def hdr(self) -> IHeader: ...

    def iterator(self) -> IIterator: ...


@runtime_checkable
class IDenseTensor(ITensor, Protocol):
    """Dense tensor capabilities (contiguity flag, strided iterator)."""

    def is_contiguous(self) -> bool: ...


@runtime_checkable
class ISparseTensor(ITensor, Protocol):
    """
    Sparse tensor capabilities.

    `hdr()` views the nonzero values; `iterator()` walks every logical
    position in row-major order and yields an index into that header, or a
    negative sentinel for implicit zeros.
    """

    @property
    def nnz(self) -> int: ...

    def to_dense(self) -> IDenseTensor: ...
