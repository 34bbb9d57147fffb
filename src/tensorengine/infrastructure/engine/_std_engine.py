"""
Standard dispatching engine.

`StdEngine` wires validation, memory-mode resolution, classification and
execution into one state machine per call::

    Validate -> ResolveMemoryPlan -> Classify -> SelectDestination
             -> Execute -> Return

and reports the outcome as an `OpResult`:

- validation / classification errors   -> FAILURE, nothing mutated
- neither operand numeric              -> NOOP
- compute-engine errors                -> FAILURE carrying the engine's
                                          exception unchanged
- otherwise                            -> SUCCESS with the result tensor

The arithmetic itself is delegated to an injected compute engine
(`NumpyArithEngine` by default).
"""

from __future__ import annotations

from typing import Any, Optional

from ...domain._errors import TensorEngineError
from ...domain._options import OptionLike, parse_func_opts
from ...domain._result import NOOP, OpResult
from .._config import EngineSettings
from ..ops.arith_cpu import NumpyArithEngine
from ._dispatch import BinaryCall, ScalarCall, execute
from ._families import ADD, DIV, MUL, SUB, OpFamily
from ._memory import resolve_memory_plan
from ._validation import prep_binary, prep_scalar


class StdEngine:
    """
    Dispatch engine for elementwise arithmetic over dense and sparse tensors.

    Parameters
    ----------
    compute : Any, optional
        Compute engine exposing ``<op>``, ``<op>_incr``, ``<op>_iter`` and
        ``<op>_iter_incr`` per operator family. Defaults to a
        `NumpyArithEngine` sharing this engine's settings.
    settings : Optional[EngineSettings]
        Defaults to `EngineSettings.from_env()`.

    Notes
    -----
    The engine holds no per-call state. Concurrent calls are safe as long
    as they do not write to the same destination tensor.
    """

    def __init__(
        self, compute: Any = None, *, settings: Optional[EngineSettings] = None
    ) -> None:
        self._settings = EngineSettings.from_env() if settings is None else settings
        self._compute = (
            NumpyArithEngine(self._settings) if compute is None else compute
        )

    @property
    def compute(self) -> Any:
        return self._compute

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    # ----------------------------
    # Generic entrypoints
    # ----------------------------
    def binary(self, family: OpFamily, a: Any, b: Any, *opts: OptionLike) -> OpResult:
        """
        Run ``a <family> b`` under the given options.

        Parameters
        ----------
        family : OpFamily
            Operator family (`ADD`, `SUB`, `MUL`, `DIV`).
        a, b : ITensor
            Operands (dense or sparse).
        *opts : FuncOpt | OperationConfig
            `Safe()`, `UnsafeInPlace()`, `WithReuse(t)`, `WithIncr(t)`.

        Returns
        -------
        OpResult
        """
        try:
            expected = prep_binary(a, b, family.name)
            if expected is NOOP:
                return OpResult.noop()
            plan = resolve_memory_plan(*expected, parse_func_opts(*opts))
            prepared = BinaryCall(family, a, b, plan).prepare()
            entry = family.entrypoints(self._compute)
        except TensorEngineError as e:
            return OpResult.failure(e)
        return self._execute(family, prepared, plan, entry)

    def scalar(
        self, family: OpFamily, a: Any, scalar: Any, *opts: OptionLike
    ) -> OpResult:
        """
        Run ``a <family> scalar`` under the given options.

        Validation follows the unary rules: `a` must be a recognised,
        accessible tensor, and a non-numeric `a` yields NoOp. The scalar must
        be a number whose kind does not rank above `a`'s (a float scalar with
        an integer tensor is a `TypeMismatchError`).
        """
        try:
            expected = prep_scalar(a, scalar, family.name)
            if expected is NOOP:
                return OpResult.noop()
            plan = resolve_memory_plan(*expected, parse_func_opts(*opts))
            prepared = ScalarCall(family, a, scalar, plan).prepare()
            entry = family.entrypoints(self._compute)
        except TensorEngineError as e:
            return OpResult.failure(e)
        return self._execute(family, prepared, plan, entry)

    def _execute(self, family: OpFamily, prepared, plan, entry) -> OpResult:
        try:
            out = execute(
                prepared,
                plan,
                entry,
                op_name=family.name,
                warn_unsafe=self._settings.warn_unsafe,
            )
        except Exception as e:
            # reported as-is, never reclassified
            return OpResult.failure(e)
        return OpResult.success(out)

    # ----------------------------
    # Operator families
    # ----------------------------
    def add(self, a: Any, b: Any, *opts: OptionLike) -> OpResult:
        """
        Elementwise ``a + b``.

        ==============  ==============  =====================================
        a               b               result / unsafe overwrites
        ==============  ==============  =====================================
        dense           dense           dense / overwrites a
        dense           sparse          dense / overwrites a
        sparse          dense           dense / overwrites b
        sparse          sparse          MethodNotImplementedError
        ==============  ==============  =====================================
        """
        return self.binary(ADD, a, b, *opts)

    def sub(self, a: Any, b: Any, *opts: OptionLike) -> OpResult:
        """Elementwise ``a - b``. Sparse ``a`` is not supported."""
        return self.binary(SUB, a, b, *opts)

    def mul(self, a: Any, b: Any, *opts: OptionLike) -> OpResult:
        """Elementwise ``a * b``; same operand matrix as `add`."""
        return self.binary(MUL, a, b, *opts)

    def div(self, a: Any, b: Any, *opts: OptionLike) -> OpResult:
        """Elementwise ``a / b``. Sparse ``a`` is not supported."""
        return self.binary(DIV, a, b, *opts)

    def add_scalar(self, a: Any, scalar: Any, *opts: OptionLike) -> OpResult:
        return self.scalar(ADD, a, scalar, *opts)

    def sub_scalar(self, a: Any, scalar: Any, *opts: OptionLike) -> OpResult:
        return self.scalar(SUB, a, scalar, *opts)

    def mul_scalar(self, a: Any, scalar: Any, *opts: OptionLike) -> OpResult:
        return self.scalar(MUL, a, scalar, *opts)

    def div_scalar(self, a: Any, scalar: Any, *opts: OptionLike) -> OpResult:
        return self.scalar(DIV, a, scalar, *opts)

    def __repr__(self) -> str:
        return f"StdEngine(compute={self._compute!r})"
