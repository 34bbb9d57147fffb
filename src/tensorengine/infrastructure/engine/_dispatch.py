"""
Execution dispatch: operand routing and destination selection.

A call is dispatched in two steps.

Routing (`BinaryCall.prepare` / `ScalarCall.prepare`)
    Control paths registered per operand-kind pair turn the operands into
    `Prepared` data: the dense *template* operand (the one the destination is
    seeded from), the header and iterator of the other operand, and the
    traversal. Nothing is mutated while routing.

    ==================  ====================================================
    DENSE x DENSE       template ``a``; flat unless a layout needs iterators
    DENSE x SPARSE      template ``a``; iterator path
    SPARSE x DENSE      template ``b`` (commutative families only)
    SPARSE x SPARSE     `MethodNotImplementedError` ("CS-CS")
    ==================  ====================================================

Execution (`execute`)
    Chooses the destination from the memory plan and invokes exactly one
    compute-engine entrypoint:

    ===============  =========================  ===========================
    mode             flat                       iterator
    ===============  =========================  ===========================
    increment        ``op_incr(a, b, reuse)``   ``op_iter_incr(...)``
    reuse            copy a -> reuse, ``op``    copy a -> reuse, ``op_iter``
    unsafe in-place  ``op(a, b)``               ``op_iter(a, b)``
    safe             ``op(clone(a), b)``        ``op_iter(clone(a), b)``
    ===============  =========================  ===========================

    In the iterator path the destination header is always paired with the
    destination's own iterator. When the reuse buffer overlaps the second
    operand (e.g. ``WithReuse(b)``), the second operand is copied before the
    buffer is seeded. Compute-engine exceptions are not caught.
"""

from __future__ import annotations

import warnings

import numpy as np
from dataclasses import dataclass
from typing import Any, Optional

from ...domain._errors import MethodNotImplementedError
from ...domain._tensor import TensorKind
from ...domain.utils._control_path import create_path_builder
from ..tensor._dense import DenseTensor
from ..tensor._header import Header, copy_header, copy_header_iter
from ._classify import Traversal, classify_kind, traversal_for
from ._families import Entrypoints, OpFamily
from ._memory import MemoryPlan

DENSE = TensorKind.DENSE
SPARSE = TensorKind.SPARSE

kind_path = create_path_builder("kinds")
"""Control-path builder routing calls on their operand-kind tuple."""


@dataclass
class Prepared:
    """
    Routed operands, ready for destination selection.

    Attributes
    ----------
    template : DenseTensor
        Dense operand whose values seed the destination (and which is
        overwritten in unsafe mode).
    b_hdr : Header
        Header of the other operand (or a one-element scalar header).
    b_iter : Optional[Any]
        Iterator over `b_hdr`; None for scalars.
    traversal : Traversal
    """

    template: DenseTensor
    b_hdr: Header
    b_iter: Optional[Any]
    traversal: Traversal


def _nyi_combination(method, state) -> MethodNotImplementedError:
    return MethodNotImplementedError(
        method.__name__, "-".join(k.value for k in state)
    )


class BinaryCall:
    """
    One binary elementwise invocation.

    Parameters
    ----------
    family : OpFamily
    a, b : ITensor
        Validated operands.
    plan : MemoryPlan
        Resolved memory plan.

    Raises
    ------
    TypeNotImplementedError
        If either operand has an unrecognised representation (`a` first).
    """

    def __init__(self, family: OpFamily, a: Any, b: Any, plan: MemoryPlan) -> None:
        self.family = family
        self.a = a
        self.b = b
        self.plan = plan
        self.kinds = (classify_kind(family.name, a), classify_kind(family.name, b))

    def prepare(self) -> Prepared:
        """Route the operands according to `kinds`."""
        ...


@kind_path(BinaryCall, BinaryCall.prepare, (DENSE, DENSE), _nyi_combination)
def _prepare_dense_dense(call: BinaryCall) -> Prepared:
    a, b = call.a, call.b
    return Prepared(
        template=a,
        b_hdr=b.hdr(),
        b_iter=b.iterator(),
        traversal=traversal_for(a, b, dest=call.plan.reuse),
    )


@kind_path(BinaryCall, BinaryCall.prepare, (DENSE, SPARSE), _nyi_combination)
def _prepare_dense_sparse(call: BinaryCall) -> Prepared:
    return Prepared(
        template=call.a,
        b_hdr=call.b.hdr(),
        b_iter=call.b.iterator(),
        traversal=Traversal.ITER,
    )


@kind_path(BinaryCall, BinaryCall.prepare, (SPARSE, DENSE), _nyi_combination)
def _prepare_sparse_dense(call: BinaryCall) -> Prepared:
    if not call.family.commutative:
        raise MethodNotImplementedError(call.family.name, "CS-Dense")
    # normalised: the dense operand seeds the destination
    return Prepared(
        template=call.b,
        b_hdr=call.a.hdr(),
        b_iter=call.a.iterator(),
        traversal=Traversal.ITER,
    )


@kind_path(BinaryCall, BinaryCall.prepare, (SPARSE, SPARSE), _nyi_combination)
def _prepare_sparse_sparse(call: BinaryCall) -> Prepared:
    raise MethodNotImplementedError(call.family.name, "CS-CS")


class ScalarCall:
    """
    One tensor-scalar invocation (``a op scalar``).

    The scalar (already checked not to outrank the tensor's kind) is cast to
    the tensor's element type and presented to the compute engine as a
    one-element header without an iterator.
    """

    def __init__(
        self, family: OpFamily, a: Any, scalar: Any, plan: MemoryPlan
    ) -> None:
        self.family = family
        self.a = a
        self.scalar = scalar
        self.plan = plan
        self.kinds = (classify_kind(family.name, a),)

    def prepare(self) -> Prepared:
        """Route the tensor operand according to `kinds`."""
        ...


@kind_path(ScalarCall, ScalarCall.prepare, (DENSE,), _nyi_combination)
def _prepare_dense_scalar(call: ScalarCall) -> Prepared:
    a = call.a
    return Prepared(
        template=a,
        b_hdr=Header.from_scalar(call.scalar, a.dtype.type),
        b_iter=None,
        traversal=traversal_for(a, dest=call.plan.reuse),
    )


@kind_path(ScalarCall, ScalarCall.prepare, (SPARSE,), _nyi_combination)
def _prepare_sparse_scalar(call: ScalarCall) -> Prepared:
    raise MethodNotImplementedError(call.family.name, "CS-scalar")


def execute(
    prepared: Prepared,
    plan: MemoryPlan,
    entry: Entrypoints,
    *,
    op_name: str = "op",
    warn_unsafe: bool = False,
) -> DenseTensor:
    """
    Select the destination and run one compute-engine entrypoint.

    Parameters
    ----------
    prepared : Prepared
        Routed operands.
    plan : MemoryPlan
        Resolved memory plan.
    entry : Entrypoints
        Compute-engine entrypoints of the operator family.
    op_name : str, optional
        Operation name used in warnings.
    warn_unsafe : bool, optional
        Emit a `RuntimeWarning` before overwriting the template in place.

    Returns
    -------
    DenseTensor
        The reuse buffer, the template itself (unsafe) or a new clone (safe).
    """
    tmpl = prepared.template
    typ = tmpl.dtype
    data_a = tmpl.hdr()
    data_b = prepared.b_hdr
    bit = prepared.b_iter
    reuse = plan.reuse

    if prepared.traversal is Traversal.ITER:
        ait = tmpl.iterator()
        if plan.incr:
            entry.op_iter_incr(
                typ, data_a, data_b, reuse.hdr(), ait, bit, reuse.iterator()
            )
            return reuse
        if plan.to_reuse:
            data_reuse = reuse.hdr()
            data_b = _detach_from(data_b, data_reuse)
            copy_header_iter(data_reuse, data_a, reuse.iterator(), ait)
            entry.op_iter(typ, data_reuse, data_b, reuse.iterator(), bit)
            return reuse
        if not plan.safe:
            _maybe_warn_unsafe(op_name, tmpl, warn_unsafe)
            entry.op_iter(typ, data_a, data_b, ait, bit)
            return tmpl
        ret = tmpl.clone()
        entry.op_iter(typ, ret.hdr(), data_b, ret.iterator(), bit)
        return ret

    if plan.incr:
        entry.op_incr(typ, data_a, data_b, reuse.hdr())
        return reuse
    if plan.to_reuse:
        data_reuse = reuse.hdr()
        data_b = _detach_from(data_b, data_reuse)
        copy_header(data_reuse, data_a)
        entry.op(typ, data_reuse, data_b)
        return reuse
    if not plan.safe:
        _maybe_warn_unsafe(op_name, tmpl, warn_unsafe)
        entry.op(typ, data_a, data_b)
        return tmpl
    ret = tmpl.clone()
    entry.op(typ, ret.hdr(), data_b)
    return ret


def _detach_from(data_b: Header, data_reuse: Header) -> Header:
    """
    Return `data_b`, or a private copy of it if it overlaps `data_reuse`.

    Seeding the reuse buffer with the template would otherwise overwrite
    `b` before it is read (``WithReuse(b)`` would compute ``a op a``).
    """
    if np.may_share_memory(data_reuse.data, data_b.data):
        return Header(data_b.data.copy())
    return data_b


def _maybe_warn_unsafe(op_name: str, t: DenseTensor, enabled: bool) -> None:
    if enabled:
        warnings.warn(
            f"{op_name}: overwriting operand in place: {t!r}",
            RuntimeWarning,
            stacklevel=6,
        )
