"""
Memory-mode resolution.

Every operator family shares one memory policy: `resolve_memory_plan` turns
an `OperationConfig` plus the expected result shape/dtype into a
`MemoryPlan`, validating any caller-supplied destination on the way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...domain._dtype import Dtype
from ...domain._errors import (
    InaccessibleDataError,
    ShapeMismatchError,
    TypeMismatchError,
)
from ...domain._options import OperationConfig
from ...domain._shape import Shape, total_size
from ...domain._tensor import TensorKind
from ..tensor._dense import DenseTensor


@dataclass(frozen=True)
class MemoryPlan:
    """
    Resolved memory plan for one call.

    Attributes
    ----------
    reuse : Optional[DenseTensor]
        Destination supplied by the caller (reuse or increment target).
    safe : bool
        False when the first operand may be overwritten in place.
    to_reuse : bool
        True when `reuse` is set.
    incr : bool
        True when the result accumulates into `reuse`.
    """

    reuse: Optional[DenseTensor]
    safe: bool
    to_reuse: bool
    incr: bool


def get_dense(t) -> DenseTensor:
    """
    Return `t` as a dense tensor.

    Raises
    ------
    TypeMismatchError
        If `t` is not dense.
    """
    if getattr(t, "kind", None) is TensorKind.DENSE and isinstance(t, DenseTensor):
        return t
    raise TypeMismatchError(DenseTensor.__name__, type(t).__name__)


def resolve_memory_plan(
    exp_shape: Shape, exp_dtype: Dtype, config: OperationConfig
) -> MemoryPlan:
    """
    Build the memory plan and validate the destination, if any.

    Parameters
    ----------
    exp_shape : Shape
        Expected result shape.
    exp_dtype : Dtype
        Expected result dtype.
    config : OperationConfig
        Parsed operation options.

    Returns
    -------
    MemoryPlan

    Raises
    ------
    TypeMismatchError
        If the destination is not dense ("cannot reuse a different type of
        tensor") or its dtype kind differs ("cannot use reuse").
    ShapeMismatchError
        If the destination's element count differs ("cannot use reuse").
    InaccessibleDataError
        If the destination is not natively accessible.
    """
    target, incr = config.incr_reuse()
    safe = config.safe
    to_reuse = target is not None
    reuse: Optional[DenseTensor] = None

    if to_reuse:
        try:
            reuse = get_dense(target)
        except TypeMismatchError as e:
            raise e.wrap("cannot reuse a different type of tensor")

        if reuse.dtype.kind is not exp_dtype.kind:
            raise TypeMismatchError(exp_dtype, reuse.dtype).wrap("cannot use reuse")

        if reuse.numel() != total_size(exp_shape):
            raise ShapeMismatchError(tuple(exp_shape), reuse.shape).wrap(
                "cannot use reuse"
            )

        if not reuse.is_natively_accessible():
            raise InaccessibleDataError(reuse)

    return MemoryPlan(reuse=reuse, safe=safe, to_reuse=to_reuse, incr=incr)
