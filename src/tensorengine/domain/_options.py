"""
Operation options (memory-reuse contract).

Callers describe where the result of an elementwise operation should live
by passing option markers to engine methods:

- `Safe()`           : allocate a fresh result, never mutate inputs (default)
- `UnsafeInPlace()`  : overwrite the first operand's buffer and return it
- `WithReuse(t)`     : overwrite the caller-supplied tensor `t` and return it
- `WithIncr(t)`      : accumulate the result into `t` and return it

The markers are folded into a single validated `OperationConfig` by
`parse_func_opts`. Combinations without a well-defined meaning are rejected
with `ConflictingOptionsError` instead of silently favouring one option.

Examples
--------
>>> cfg = parse_func_opts(WithReuse(out))
>>> cfg.reuse is out, cfg.safe
(True, True)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ._errors import ConflictingOptionsError
from ._tensor import ITensor


class FuncOpt:
    """Base class for operation option markers."""

    __slots__ = ()


class Safe(FuncOpt):
    """Request a freshly allocated result; inputs are left untouched."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Safe()"


class UnsafeInPlace(FuncOpt):
    """
    Request that the first operand's buffer be overwritten with the result.

    The returned tensor *is* the first operand. Use this marker only when the
    caller owns the operand and wants it mutated.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "UnsafeInPlace()"


class WithReuse(FuncOpt):
    """Write the result into `target`, discarding its previous contents."""

    __slots__ = ("target",)

    def __init__(self, target: ITensor) -> None:
        self.target = target

    def __repr__(self) -> str:
        return f"WithReuse({self.target!r})"


class WithIncr(FuncOpt):
    """Accumulate the result into `target` (``target += result``)."""

    __slots__ = ("target",)

    def __init__(self, target: ITensor) -> None:
        self.target = target

    def __repr__(self) -> str:
        return f"WithIncr({self.target!r})"


@dataclass(frozen=True)
class OperationConfig:
    """
    Validated operation configuration.

    Attributes
    ----------
    safe : bool
        False only when in-place overwrite of the first operand was requested.
    reuse : Optional[ITensor]
        Destination to overwrite.
    incr : Optional[ITensor]
        Destination to accumulate into.

    Raises
    ------
    ConflictingOptionsError
        If both `reuse` and `incr` are set.
    """

    safe: bool = True
    reuse: Optional[ITensor] = None
    incr: Optional[ITensor] = None

    def __post_init__(self) -> None:
        if self.reuse is not None and self.incr is not None:
            raise ConflictingOptionsError("WithReuse", "WithIncr")

    def incr_reuse(self) -> tuple[Optional[ITensor], bool]:
        """
        Return the destination tensor (if any) and whether it accumulates.

        Returns
        -------
        tuple[Optional[ITensor], bool]
            ``(incr_target, True)`` when incrementing, otherwise
            ``(reuse_target_or_None, False)``.
        """
        if self.incr is not None:
            return self.incr, True
        return self.reuse, False


OptionLike = Union[FuncOpt, OperationConfig]


def parse_func_opts(*opts: OptionLike) -> OperationConfig:
    """
    Fold option markers into a single `OperationConfig`.

    Parameters
    ----------
    *opts : FuncOpt | OperationConfig
        Option markers. A single ready-made `OperationConfig` is accepted and
        returned unchanged.

    Returns
    -------
    OperationConfig
        The validated configuration.

    Raises
    ------
    ConflictingOptionsError
        If `Safe()` and `UnsafeInPlace()` are both given, if more than one
        destination is given, or if reuse and increment are combined.
    TypeError
        If an argument is not an option marker.
    """
    if len(opts) == 1 and isinstance(opts[0], OperationConfig):
        return opts[0]

    safe: Optional[bool] = None
    reuse: Optional[ITensor] = None
    incr: Optional[ITensor] = None

    for opt in opts:
        if isinstance(opt, Safe):
            if safe is False:
                raise ConflictingOptionsError("Safe", "UnsafeInPlace")
            safe = True
        elif isinstance(opt, UnsafeInPlace):
            if safe is True:
                raise ConflictingOptionsError("Safe", "UnsafeInPlace")
            safe = False
        elif isinstance(opt, WithReuse):
            if reuse is not None:
                raise ConflictingOptionsError("WithReuse", "WithReuse")
            reuse = opt.target
        elif isinstance(opt, WithIncr):
            if incr is not None:
                raise ConflictingOptionsError("WithIncr", "WithIncr")
            incr = opt.target
        else:
            raise TypeError(f"Unsupported operation option: {opt!r}")

    return OperationConfig(safe=True if safe is None else safe, reuse=reuse, incr=incr)
