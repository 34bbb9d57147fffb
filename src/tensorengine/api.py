"""
Functional arithmetic API.

Thin wrappers around a process-wide default `StdEngine` that return tensors
instead of `OpResult` values:

- failures raise the engine's error types (or the compute engine's own
  exceptions, unchanged);
- a NoOp (no numeric operand) returns the first operand unmodified.

Functions ending in ``_`` mutate their first dense operand in place and
return it (for sparse x dense the dense operand is the one overwritten);
all other functions leave their inputs untouched unless a `WithReuse` /
`WithIncr` destination is given.
"""

from __future__ import annotations

from typing import Any, Optional

from .domain._options import OptionLike, UnsafeInPlace
from .infrastructure.engine import StdEngine

_default_engine: Optional[StdEngine] = None


def get_default_engine() -> StdEngine:
    """Return the default engine, creating it from the environment on first use."""
    global _default_engine
    if _default_engine is None:
        _default_engine = StdEngine()
    return _default_engine


def set_default_engine(engine: Optional[StdEngine]) -> None:
    """Replace the default engine (None re-creates it lazily)."""
    global _default_engine
    _default_engine = engine


# ----------------------------
# Tensor-tensor
# ----------------------------
def add(a: Any, b: Any, *opts: OptionLike) -> Any:
    return get_default_engine().add(a, b, *opts).unwrap_or(a)


def sub(a: Any, b: Any, *opts: OptionLike) -> Any:
    return get_default_engine().sub(a, b, *opts).unwrap_or(a)


def mul(a: Any, b: Any, *opts: OptionLike) -> Any:
    return get_default_engine().mul(a, b, *opts).unwrap_or(a)


def div(a: Any, b: Any, *opts: OptionLike) -> Any:
    return get_default_engine().div(a, b, *opts).unwrap_or(a)


def add_(a: Any, b: Any) -> Any:
    """``a += b`` in place; returns the overwritten tensor."""
    return add(a, b, UnsafeInPlace())


def sub_(a: Any, b: Any) -> Any:
    return sub(a, b, UnsafeInPlace())


def mul_(a: Any, b: Any) -> Any:
    return mul(a, b, UnsafeInPlace())


def div_(a: Any, b: Any) -> Any:
    return div(a, b, UnsafeInPlace())


# ----------------------------
# Tensor-scalar
# ----------------------------
def add_scalar(a: Any, scalar: Any, *opts: OptionLike) -> Any:
    return get_default_engine().add_scalar(a, scalar, *opts).unwrap_or(a)


def sub_scalar(a: Any, scalar: Any, *opts: OptionLike) -> Any:
    return get_default_engine().sub_scalar(a, scalar, *opts).unwrap_or(a)


def mul_scalar(a: Any, scalar: Any, *opts: OptionLike) -> Any:
    return get_default_engine().mul_scalar(a, scalar, *opts).unwrap_or(a)


def div_scalar(a: Any, scalar: Any, *opts: OptionLike) -> Any:
    return get_default_engine().div_scalar(a, scalar, *opts).unwrap_or(a)


def add_scalar_(a: Any, scalar: Any) -> Any:
    return add_scalar(a, scalar, UnsafeInPlace())


def sub_scalar_(a: Any, scalar: Any) -> Any:
    return sub_scalar(a, scalar, UnsafeInPlace())


def mul_scalar_(a: Any, scalar: Any) -> Any:
    return mul_scalar(a, scalar, UnsafeInPlace())


def div_scalar_(a: Any, scalar: Any) -> Any:
    return div_scalar(a, scalar, UnsafeInPlace())
