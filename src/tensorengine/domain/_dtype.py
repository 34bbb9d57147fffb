"""
Element-type descriptors.

`Dtype` pairs a concrete element type (anything exposing a single-character
``kind`` code and a ``name``, e.g. ``numpy.dtype``) with a coarse
`DtypeKind` family. Kind equality is what the engine checks between
operands; the concrete type is what compute kernels specialise on.

This module stays free of NumPy so the domain layer does not depend on a
numerical backend.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class DtypeKind(Enum):
    """
    Coarse element-type family.

    Attributes
    ----------
    BOOL, INT, UINT, FLOAT, COMPLEX : DtypeKind
        Numeric-ish families keyed by the array-protocol kind codes
        ``b``, ``i``, ``u``, ``f`` and ``c``.
    OTHER : DtypeKind
        Anything else (strings, objects, datetimes, ...).
    """

    BOOL = "b"
    INT = "i"
    UINT = "u"
    FLOAT = "f"
    COMPLEX = "c"
    OTHER = "?"

    @classmethod
    def from_code(cls, code: str) -> "DtypeKind":
        for member in cls:
            if member.value == code:
                return member
        return cls.OTHER


_NUMERIC_KINDS = frozenset(
    {DtypeKind.INT, DtypeKind.UINT, DtypeKind.FLOAT, DtypeKind.COMPLEX}
)


class Dtype:
    """
    Element-type descriptor with a coarse kind.

    Parameters
    ----------
    type : Any
        Concrete element type. Must expose ``kind`` (array-protocol kind code)
        and ``name``; ``numpy.dtype`` instances satisfy this.
    """

    __slots__ = ("type",)

    def __init__(self, type: Any) -> None:
        if not hasattr(type, "kind"):
            raise TypeError(f"Unsupported element type: {type!r}")
        self.type = type

    @property
    def kind(self) -> DtypeKind:
        return DtypeKind.from_code(str(self.type.kind))

    @property
    def name(self) -> str:
        return str(getattr(self.type, "name", self.type))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dtype):
            return NotImplemented
        return self.type == other.type

    def __hash__(self) -> int:
        return hash(self.type)

    def __repr__(self) -> str:
        return f"Dtype({self.name})"

    def __str__(self) -> str:
        return self.name


def is_number(dtype: Dtype) -> bool:
    """Return True if `dtype` belongs to a numeric family."""
    return dtype.kind in _NUMERIC_KINDS


def scalar_kind(value: Any) -> DtypeKind:
    """
    Return the kind of a scalar value.

    Python ``bool``/``int``/``float``/``complex`` map to their families;
    objects exposing a ``dtype`` (NumPy scalars) use its kind code.
    Anything else is `DtypeKind.OTHER`.
    """
    if isinstance(value, bool):
        return DtypeKind.BOOL
    if isinstance(value, int):
        return DtypeKind.INT
    if isinstance(value, float):
        return DtypeKind.FLOAT
    if isinstance(value, complex):
        return DtypeKind.COMPLEX
    dtype = getattr(value, "dtype", None)
    if dtype is not None and getattr(value, "ndim", 0) == 0 and hasattr(dtype, "kind"):
        return DtypeKind.from_code(str(dtype.kind))
    return DtypeKind.OTHER
