"""
Operator families.

An operator family names the four compute-engine entrypoints used for one
arithmetic operator (``<name>``, ``<name>_incr``, ``<name>_iter``,
``<name>_iter_incr``) and records whether the operator is commutative,
which decides whether operands may be reordered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ...domain._errors import MethodNotImplementedError


@dataclass(frozen=True)
class Entrypoints:
    op: Callable[..., Any]
    op_incr: Callable[..., Any]
    op_iter: Callable[..., Any]
    op_iter_incr: Callable[..., Any]


@dataclass(frozen=True)
class OpFamily:
    """
    Elementwise operator family.

    Attributes
    ----------
    name : str
        Family name and entrypoint prefix, e.g. ``"add"``.
    commutative : bool
        True if ``a op b == b op a``.
    """

    name: str
    commutative: bool

    def entrypoints(self, engine: Any) -> Entrypoints:
        """
        Resolve this family's entrypoints on a compute engine.

        Raises
        ------
        MethodNotImplementedError
            If the engine lacks any of the four entrypoints.
        """
        names = (
            self.name,
            f"{self.name}_incr",
            f"{self.name}_iter",
            f"{self.name}_iter_incr",
        )
        fns = []
        for n in names:
            fn = getattr(engine, n, None)
            if not callable(fn):
                raise MethodNotImplementedError(n, type(engine).__name__)
            fns.append(fn)
        return Entrypoints(*fns)


ADD = OpFamily("add", commutative=True)
SUB = OpFamily("sub", commutative=False)
MUL = OpFamily("mul", commutative=True)
DIV = OpFamily("div", commutative=False)

FAMILIES = {f.name: f for f in (ADD, SUB, MUL, DIV)}
