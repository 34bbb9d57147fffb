"""
Tri-state operation results.

Engine methods report one of three outcomes:

- SUCCESS : a result tensor was produced (possibly an alias of an input)
- NOOP    : neither operand is numeric, there is nothing to compute
- FAILURE : validation, classification or the compute engine failed

NoOp is deliberately not an exception, so callers cannot mistake "nothing to
do" for a hard failure by catching too broadly.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class OpStatus(Enum):
    SUCCESS = "success"
    NOOP = "noop"
    FAILURE = "failure"


class _NoOpType:
    """Singleton sentinel returned by validators when there is no work."""

    _instance: Optional["_NoOpType"] = None

    def __new__(cls) -> "_NoOpType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOOP"

    def __bool__(self) -> bool:
        return False


NOOP = _NoOpType()


class OpResult(Generic[T]):
    """
    Outcome of an engine operation.

    Construct through :meth:`success`, :meth:`noop` or :meth:`failure`.

    Attributes
    ----------
    status : OpStatus
    value : Optional[T]
        The result tensor on success.
    error : Optional[BaseException]
        The failure, exactly as raised by the failing component.
    """

    __slots__ = ("status", "value", "error")

    def __init__(
        self,
        status: OpStatus,
        value: Optional[T] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        self.status = status
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value: T) -> "OpResult[T]":
        return cls(OpStatus.SUCCESS, value=value)

    @classmethod
    def noop(cls) -> "OpResult[T]":
        return cls(OpStatus.NOOP)

    @classmethod
    def failure(cls, error: BaseException) -> "OpResult[T]":
        return cls(OpStatus.FAILURE, error=error)

    @property
    def is_success(self) -> bool:
        return self.status is OpStatus.SUCCESS

    @property
    def is_noop(self) -> bool:
        return self.status is OpStatus.NOOP

    @property
    def is_failure(self) -> bool:
        return self.status is OpStatus.FAILURE

    def unwrap(self) -> Optional[T]:
        """
        Return the value, re-raising a stored failure unchanged.

        Returns
        -------
        Optional[T]
            The result tensor, or None for NoOp.
        """
        if self.error is not None:
            raise self.error
        return self.value

    def unwrap_or(self, default: Any) -> Any:
        """
        Return the value, or `default` for NoOp.

        Failures are still raised; only "nothing to do" falls back.
        """
        if self.error is not None:
            raise self.error
        if self.is_noop:
            return default
        return self.value

    def __repr__(self) -> str:
        if self.is_failure:
            return f"OpResult(FAILURE, error={self.error!r})"
        if self.is_noop:
            return "OpResult(NOOP)"
        return f"OpResult(SUCCESS, value={self.value!r})"
