"""
Dispatch- and memory-policy exceptions for tensorengine.

This module defines the error kinds raised while validating operands,
resolving a memory plan and classifying operand representations for
elementwise arithmetic. Every error kind derives from `TensorEngineError`
and additionally from the closest built-in exception so that callers can
catch either the engine-specific type or the generic Python category.

Error kinds
-----------
- `InaccessibleDataError`  : operand storage is not natively addressable.
- `TypeMismatchError`      : dtype-kind disagreement (operands or reuse).
- `ShapeMismatchError`     : shape / size disagreement (operands or reuse).
- `MethodNotImplementedError` : recognised but unimplemented combination.
- `TypeNotImplementedError`   : unrecognised operand representation.
- `ConflictingOptionsError`   : mutually exclusive operation options.

Notes
-----
"Nothing to compute" is not an error. It is reported through the NoOp
status of `OpResult` (see `tensorengine.domain._result`).
"""

from __future__ import annotations

from typing import Any


class TensorEngineError(Exception):
    """
    Base class for all errors raised by the dispatch engine.

    Context can be layered onto an error with :meth:`wrap`, which prefixes the
    message while preserving the concrete error kind, e.g.::

        ShapeMismatchError((6,), (4,)).wrap("cannot use reuse")
        # -> "cannot use reuse: shape mismatch: expected (6,), got (4,)"

    Attributes
    ----------
    contexts : list[str]
        Context messages, outermost first.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.contexts: list[str] = []

    def wrap(self, context: str) -> "TensorEngineError":
        """
        Prefix this error with a context message (in-place) and return it.

        Parameters
        ----------
        context : str
            Human-readable context, e.g. ``"cannot use reuse"``.

        Returns
        -------
        TensorEngineError
            The same error instance, so it can be raised directly.
        """
        self.contexts.insert(0, context)
        self.message = f"{context}: {self.message}"
        self.args = (self.message,)
        return self

    def __str__(self) -> str:
        return self.message


class InaccessibleDataError(TensorEngineError, RuntimeError):
    """
    Raised when an operand's storage is not natively addressable.

    Headers and iterators can only be built over host memory; tensors placed
    on other devices are rejected before any header access happens.
    """

    def __init__(self, tensor: Any) -> None:
        super().__init__(f"data is not natively accessible: {tensor!r}")
        self.tensor = tensor


class TypeMismatchError(TensorEngineError, TypeError):
    """
    Raised when dtype kinds disagree.

    Used both for operand/operand checks and for reuse-buffer checks.
    """

    def __init__(self, expected: Any, got: Any) -> None:
        super().__init__(f"type mismatch: expected {expected}, got {got}")
        self.expected = expected
        self.got = got


class ShapeMismatchError(TensorEngineError, ValueError):
    """
    Raised when shapes (or total element counts) disagree.

    Used both for operand/operand checks and for reuse-buffer checks.
    """

    def __init__(self, expected: Any, got: Any) -> None:
        super().__init__(f"shape mismatch: expected {expected}, got {got}")
        self.expected = expected
        self.got = got


class MethodNotImplementedError(TensorEngineError, NotImplementedError):
    """
    Raised for a recognised operand combination that has no implementation.

    Attributes
    ----------
    op : str
        Operation name, e.g. ``"add"``.
    combination : str
        Operand combination, e.g. ``"CS-CS"``.
    """

    def __init__(self, op: str, combination: str) -> None:
        super().__init__(f"{op} is not implemented for {combination}")
        self.op = op
        self.combination = combination


class TypeNotImplementedError(TensorEngineError, NotImplementedError):
    """
    Raised when an operand has a representation the engine does not know.
    """

    def __init__(self, op: str, operand: Any) -> None:
        super().__init__(
            f"{op} is not implemented for operand of type {type(operand).__name__}"
        )
        self.op = op
        self.operand = operand


class ConflictingOptionsError(TensorEngineError, ValueError):
    """Raised when mutually exclusive operation options are combined."""

    def __init__(self, first: str, second: str) -> None:
        super().__init__(f"options {first} and {second} cannot be combined")
        self.first = first
        self.second = second
