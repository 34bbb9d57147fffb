"""
Operand validation for elementwise operations.

Checks run in a fixed order and stop at the first violation, so a given set
of operands always produces the same diagnostic:

1. every operand is a known tensor representation -> `TypeNotImplementedError`
2. every operand is natively accessible            -> `InaccessibleDataError`
3. at least one operand is numeric                 -> `NOOP` sentinel (not an error)
4. dtype kinds agree                               -> `TypeMismatchError`
5. shapes agree (binary only)                      -> `ShapeMismatchError`

Tensor-scalar operations additionally reject a scalar whose kind ranks above
the tensor's (e.g. a float scalar with an integer tensor), since casting it
to the tensor's element type would silently lose information.

On success the expected result ``(shape, dtype)`` is returned for the memory
mode resolver.
"""

from __future__ import annotations

from typing import Any, Union

from ...domain._dtype import Dtype, DtypeKind, is_number, scalar_kind
from ...domain._errors import (
    InaccessibleDataError,
    ShapeMismatchError,
    TypeMismatchError,
    TypeNotImplementedError,
)
from ...domain._result import NOOP, _NoOpType
from ...domain._shape import Shape
from ...domain._tensor import ITensor
from ._classify import classify_kind

Expected = tuple[Shape, Dtype]

_KIND_RANK = {
    DtypeKind.BOOL: 0,
    DtypeKind.UINT: 1,
    DtypeKind.INT: 1,
    DtypeKind.FLOAT: 2,
    DtypeKind.COMPLEX: 3,
}


def _require_accessible(t: ITensor) -> None:
    if not t.is_natively_accessible():
        raise InaccessibleDataError(t)


def prep_binary(a: ITensor, b: ITensor, op: str = "op") -> Union[Expected, _NoOpType]:
    """
    Validate two operands of a binary elementwise operation.

    Parameters
    ----------
    a, b : ITensor
        Operands.
    op : str, optional
        Operation name used in diagnostics.

    Returns
    -------
    tuple[Shape, Dtype] | NOOP
        Expected result shape and dtype (taken from `a`), or `NOOP` when
        neither operand is numeric.

    Raises
    ------
    TypeNotImplementedError
        If `a` (checked first) or `b` is not a recognised tensor.
    InaccessibleDataError
        If `a` (checked first) or `b` is not natively accessible.
    TypeMismatchError
        If the dtype kinds differ.
    ShapeMismatchError
        If the shapes differ.
    """
    classify_kind(op, a)
    classify_kind(op, b)
    _require_accessible(a)
    _require_accessible(b)

    at, bt = a.dtype, b.dtype
    if not is_number(at) and not is_number(bt):
        return NOOP

    if at.kind is not bt.kind:
        raise TypeMismatchError(at, bt)

    if tuple(a.shape) != tuple(b.shape):
        raise ShapeMismatchError(tuple(a.shape), tuple(b.shape))

    return tuple(a.shape), at


def prep_unary(a: ITensor, op: str = "op") -> Union[Expected, _NoOpType]:
    """
    Validate the operand of a unary (or tensor-scalar) operation.

    Returns
    -------
    tuple[Shape, Dtype] | NOOP
    """
    classify_kind(op, a)
    _require_accessible(a)
    if not is_number(a.dtype):
        return NOOP
    return tuple(a.shape), a.dtype


def check_scalar(dtype: Dtype, scalar: Any, op: str = "op") -> None:
    """
    Check that `scalar` can be cast to `dtype` without losing its kind.

    Raises
    ------
    TypeNotImplementedError
        If `scalar` is not a number.
    TypeMismatchError
        If the scalar's kind ranks above `dtype`'s (bool < int/uint <
        float < complex).
    """
    kind = scalar_kind(scalar)
    if kind not in _KIND_RANK:
        raise TypeNotImplementedError(op, scalar)
    if _KIND_RANK[kind] > _KIND_RANK.get(dtype.kind, -1):
        raise TypeMismatchError(dtype, f"{type(scalar).__name__} scalar {scalar!r}")


def prep_scalar(a: ITensor, scalar: Any, op: str = "op") -> Union[Expected, _NoOpType]:
    """
    Validate a tensor-scalar operation.

    Runs `prep_unary` on `a`, then `check_scalar` against its dtype.
    """
    expected = prep_unary(a, op)
    if expected is NOOP:
        return NOOP
    check_scalar(a.dtype, scalar, op)
    return expected
