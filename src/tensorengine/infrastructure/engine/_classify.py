"""
Operand classification.

Two independent questions are answered here:

- *Representation*: which `TensorKind` each operand has. Operands that do
  not report a known kind are rejected with `TypeNotImplementedError`.
- *Traversal*: whether the flat header-to-header kernels suffice, or the
  iterator kernels are needed. Iterators are required as soon as a dense
  operand is non-contiguous, an operand is sparse, or the destination is
  non-contiguous.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from ...domain._errors import TypeNotImplementedError
from ...domain._tensor import TensorKind


class Traversal(Enum):
    FLAT = "flat"
    ITER = "iter"


def classify_kind(op: str, t: Any) -> TensorKind:
    """
    Return the representation of `t`.

    Raises
    ------
    TypeNotImplementedError
        If `t` does not report a `TensorKind` or lacks header access.
    """
    kind = getattr(t, "kind", None)
    if not isinstance(kind, TensorKind) or not callable(getattr(t, "hdr", None)):
        raise TypeNotImplementedError(op, t)
    return kind


def requires_iterator(t: Any) -> bool:
    """
    Check whether `t` can only be traversed through an iterator.

    Sparse tensors always need one; dense tensors need one when their view
    is not the whole buffer in row-major order.
    """
    if t.kind is TensorKind.SPARSE:
        return True
    return not t.is_contiguous()


def traversal_for(*operands: Any, dest: Optional[Any] = None) -> Traversal:
    """Pick the traversal for the given operands and optional destination."""
    if any(requires_iterator(t) for t in operands):
        return Traversal.ITER
    if dest is not None and requires_iterator(dest):
        return Traversal.ITER
    return Traversal.FLAT
