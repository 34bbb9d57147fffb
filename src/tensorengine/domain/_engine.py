"""
Compute-engine capability contract.

The dispatch engine does no arithmetic itself. It hands raw headers and
iterators to an injected compute engine that exposes four entrypoints per
operator family. For the ``add`` family these are:

==================  ============================================================
``add``             ``dest[i] = dest[i] + src[i]`` over two flat headers
``add_incr``        ``dest[i] += a[i] + b[i]`` over three flat headers
``add_iter``        ``a[ai] = a[ai] + b[bi]`` stepping two iterators in lockstep
``add_iter_incr``   ``dest[di] += a[ai] + b[bi]`` stepping three iterators
==================  ============================================================

Other families (``sub``, ``mul``, ``div``) follow the same naming scheme.

Conventions
-----------
- A source header of length 1 combined with no iterator denotes a scalar
  operand that is broadcast against the destination.
- A negative offset produced by the source iterator denotes an implicit zero
  (sparse operand without a stored value at that position).
- Entrypoints return None on success and raise on failure; the dispatcher
  passes engine exceptions through unchanged.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ._dtype import Dtype
from ._tensor import IHeader, IIterator


@runtime_checkable
class IArithEngine(Protocol):
    """
    Structural contract for a compute engine supporting the ``add`` family.

    Engines supporting further families expose the same four entrypoints
    under the family's name; the dispatcher resolves them by name.
    """

    def add(self, dtype: Dtype, dest: IHeader, src: IHeader) -> None: ...

    def add_incr(
        self, dtype: Dtype, a: IHeader, b: IHeader, dest: IHeader
    ) -> None: ...

    def add_iter(
        self,
        dtype: Dtype,
        a: IHeader,
        b: IHeader,
        a_it: IIterator,
        b_it: Optional[IIterator],
    ) -> None: ...

    def add_iter_incr(
        self,
        dtype: Dtype,
        a: IHeader,
        b: IHeader,
        dest: IHeader,
        a_it: IIterator,
        b_it: Optional[IIterator],
        dest_it: IIterator,
    ) -> None: ...
