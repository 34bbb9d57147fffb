# scripts/bench_dispatch_modes.py
"""
Microbench: elementwise dispatch across memory modes and operand layouts.

What it measures
----------------
- Per-call latency of `StdEngine` for each (layout, mode) pair:
  layouts ``flat`` (contiguous dense), ``strided`` (transposed dense view)
  and ``sparse`` (dense x CSR at the given density); modes ``safe``,
  ``unsafe``, ``reuse`` and ``incr``.
- Uses warmup iterations (not recorded), then repeats with median/p95.

Notes
-----
- The whole dispatch is timed: validation, memory-plan resolution,
  routing and the NumPy compute engine. For small tensors the Python
  overhead dominates.
- Unsafe and increment modes mutate their destinations on every
  iteration; values drift but timings are unaffected.

Example
-------
python -O scripts/bench_dispatch_modes.py --op add --shape 256 256 \
    --dtype float32 --density 0.05 --warmup 20 --repeats 100
"""

from __future__ import annotations

import argparse
import math
import statistics
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

import numpy as np

import os
import sys

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from tensorengine import (  # noqa: E402
    CSTensor,
    DenseTensor,
    EngineSettings,
    StdEngine,
    UnsafeInPlace,
    WithIncr,
    WithReuse,
)
from tensorengine.infrastructure.engine import FAMILIES  # noqa: E402


# ----------------------------
# Stats helpers
# ----------------------------
def _median(xs: Sequence[float]) -> float:
    return statistics.median(xs) if xs else float("nan")


def _p95(xs: Sequence[float]) -> float:
    if not xs:
        return float("nan")
    ys = sorted(xs)
    k = int(math.ceil(0.95 * len(ys))) - 1
    k = max(0, min(k, len(ys) - 1))
    return ys[k]


def _fmt(sec: float) -> str:
    if sec < 1e-3:
        return f"{sec * 1e6:8.1f} µs"
    return f"{sec * 1e3:8.3f} ms"


@dataclass
class BenchRow:
    layout: str
    mode: str
    med: float
    p95: float


# ----------------------------
# Bench core
# ----------------------------
def _time_call(fn: Callable[[], object], *, warmup: int, repeats: int) -> List[float]:
    for _ in range(warmup):
        fn()

    times: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        times.append(t1 - t0)
    return times


def _build_operands(shape, dtype, density: float, rng) -> Dict[str, tuple]:
    a_np = rng.standard_normal(size=shape).astype(dtype)
    b_np = rng.standard_normal(size=shape).astype(dtype) + 2.0
    s_np = np.where(rng.random(size=shape) < density, b_np, 0).astype(dtype)

    flat_a = DenseTensor.from_numpy(a_np)
    strided_a = DenseTensor.from_numpy(a_np.T.copy()).T
    return {
        "flat": (flat_a, DenseTensor.from_numpy(b_np)),
        "strided": (strided_a, DenseTensor.from_numpy(b_np)),
        "sparse": (flat_a, CSTensor.from_numpy(s_np)),
    }


def _build_modes(shape, dtype) -> Dict[str, Callable[[], tuple]]:
    reuse = DenseTensor(shape, dtype=dtype)
    acc = DenseTensor(shape, dtype=dtype)
    return {
        "safe": lambda: (),
        "unsafe": lambda: (UnsafeInPlace(),),
        "reuse": lambda: (WithReuse(reuse),),
        "incr": lambda: (WithIncr(acc),),
    }


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--op", choices=sorted(FAMILIES), default="add")
    ap.add_argument(
        "--shape",
        nargs=2,
        type=int,
        default=[256, 256],
        help="2-D tensor shape, e.g. --shape 256 256",
    )
    ap.add_argument("--dtype", choices=["float32", "float64"], default="float32")
    ap.add_argument("--density", type=float, default=0.05)
    ap.add_argument("--warmup", type=int, default=20)
    ap.add_argument("--repeats", type=int, default=100)
    args = ap.parse_args()

    shape = tuple(int(x) for x in args.shape)
    dtype = np.float32 if args.dtype == "float32" else np.float64
    family = FAMILIES[args.op]
    engine = StdEngine(settings=EngineSettings(fp_errors="ignore"))

    print("=" * 72)
    print(
        f"Dispatch bench | op={family.name} shape={shape} dtype={args.dtype} "
        f"density={args.density} warmup={args.warmup} repeats={args.repeats}"
    )
    print("=" * 72)

    operands = _build_operands(shape, dtype, args.density, np.random.default_rng(0))
    modes = _build_modes(shape, dtype)

    rows: List[BenchRow] = []
    for layout, (a, b) in operands.items():
        for mode, opts in modes.items():
            res = engine.binary(family, a, b, *opts())
            if res.is_failure:
                print(f"[SKIP] {layout}/{mode}: {res.error}")
                continue
            times = _time_call(
                lambda: engine.binary(family, a, b, *opts()),
                warmup=args.warmup,
                repeats=args.repeats,
            )
            rows.append(BenchRow(layout, mode, _median(times), _p95(times)))

    print("\nResults (median / p95):")
    print("-" * 72)
    print(f"{'layout':10s} {'mode':8s} | {'median':>12s} {'p95':>12s}")
    print("-" * 72)
    for r in rows:
        print(f"{r.layout:10s} {r.mode:8s} | {_fmt(r.med):>12s} {_fmt(r.p95):>12s}")
    print("-" * 72)


if __name__ == "__main__":
    main()
