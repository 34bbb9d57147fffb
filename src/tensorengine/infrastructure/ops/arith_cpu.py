"""
NumPy compute engine for elementwise arithmetic.

`NumpyArithEngine` implements the compute-engine contract described in
:mod:`tensorengine.domain._engine` for the ``add``, ``sub``, ``mul`` and
``div`` families. Each family exposes four entrypoints:

- ``<op>(dtype, dest, src)``
- ``<op>_incr(dtype, a, b, dest)``
- ``<op>_iter(dtype, a, b, a_it, b_it)``
- ``<op>_iter_incr(dtype, a, b, dest, a_it, b_it, dest_it)``

Kernels operate on raw headers. Iterators are drained into offset arrays and
the arithmetic runs vectorised over gathered values; results are scattered
back through the destination offsets.

Dtype conventions
-----------------
- Integer ``div`` is floor division and rejects zero divisors with
  `ZeroDivisionError` (including implicit sparse zeros).
- Floating ``div`` is true division; division by zero follows the
  configured floating-point policy (`EngineSettings.fp_errors`).
- Non-numeric element types raise `TypeError`.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from ...domain._dtype import Dtype, DtypeKind, is_number
from .._config import EngineSettings
from ..tensor._header import Header

Kernel = Callable[[Dtype, np.ndarray, np.ndarray], np.ndarray]


def _div(dtype: Dtype, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    if dtype.kind in (DtypeKind.INT, DtypeKind.UINT):
        if np.any(y == 0):
            raise ZeroDivisionError("integer division by zero")
        return np.floor_divide(x, y)
    return np.true_divide(x, y)


_KERNELS: dict[str, Kernel] = {
    "add": lambda dtype, x, y: np.add(x, y),
    "sub": lambda dtype, x, y: np.subtract(x, y),
    "mul": lambda dtype, x, y: np.multiply(x, y),
    "div": _div,
}


def _gather(hdr: Header, it) -> np.ndarray:
    """
    Read source values in traversal order.

    With no iterator the header must be a one-element scalar, returned as-is
    for broadcasting. Negative offsets read as zero.
    """
    if it is None:
        if hdr.length != 1:
            raise ValueError(
                f"source without iterator must be a scalar header, got length {hdr.length}"
            )
        return hdr.data
    j = it.offsets()
    mask = j >= 0
    if mask.all():
        return hdr.data[j]
    vals = np.zeros(j.shape[0], dtype=hdr.data.dtype)
    vals[mask] = hdr.data[j[mask]]
    return vals


def _check_len(name: str, n: int, values: np.ndarray) -> None:
    if values.shape[0] not in (n, 1):
        raise ValueError(f"{name}: length mismatch ({n} vs {values.shape[0]})")


def _family_entrypoints(op: str):
    """Build the four entrypoints of one operator family."""

    def flat(self, dtype: Dtype, dest: Header, src: Header) -> None:
        d = dest.data
        _check_len(op, d.shape[0], src.data)
        d[...] = self._apply(op, dtype, d, src.data)

    def flat_incr(self, dtype: Dtype, a: Header, b: Header, dest: Header) -> None:
        d = dest.data
        _check_len(op, d.shape[0], a.data)
        _check_len(op, d.shape[0], b.data)
        d[...] = d + self._apply(op, dtype, a.data, b.data)

    def it(self, dtype: Dtype, a: Header, b: Header, a_it, b_it) -> None:
        i = a_it.offsets()
        vals = _gather(b, b_it)
        _check_len(op, i.shape[0], vals)
        a.data[i] = self._apply(op, dtype, a.data[i], vals)

    def it_incr(
        self,
        dtype: Dtype,
        a: Header,
        b: Header,
        dest: Header,
        a_it,
        b_it,
        dest_it,
    ) -> None:
        i = a_it.offsets()
        k = dest_it.offsets()
        vals = _gather(b, b_it)
        _check_len(op, i.shape[0], vals)
        if k.shape[0] != i.shape[0]:
            raise ValueError(f"{op}: length mismatch ({k.shape[0]} vs {i.shape[0]})")
        dest.data[k] = dest.data[k] + self._apply(op, dtype, a.data[i], vals)

    flat.__name__ = op
    flat_incr.__name__ = f"{op}_incr"
    it.__name__ = f"{op}_iter"
    it_incr.__name__ = f"{op}_iter_incr"
    return flat, flat_incr, it, it_incr


class NumpyArithEngine:
    """
    Host compute engine backed by NumPy ufuncs.

    Parameters
    ----------
    settings : Optional[EngineSettings]
        Floating-point error policy source. Defaults to
        `EngineSettings.from_env()`.

    Notes
    -----
    Stateless apart from its settings; safe to share across threads as long
    as calls write to disjoint headers.
    """

    def __init__(self, settings: Optional[EngineSettings] = None) -> None:
        self._settings = EngineSettings.from_env() if settings is None else settings

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def _apply(self, op: str, dtype: Dtype, x: np.ndarray, y: np.ndarray):
        if not is_number(dtype):
            raise TypeError(f"{op} does not support dtype {dtype}")
        with np.errstate(all=self._settings.fp_errors):
            return _KERNELS[op](dtype, x, y)

    add, add_incr, add_iter, add_iter_incr = _family_entrypoints("add")
    sub, sub_incr, sub_iter, sub_iter_incr = _family_entrypoints("sub")
    mul, mul_incr, mul_iter, mul_iter_incr = _family_entrypoints("mul")
    div, div_incr, div_iter, div_iter_incr = _family_entrypoints("div")

    def __repr__(self) -> str:
        return f"NumpyArithEngine(fp_errors={self._settings.fp_errors!r})"
