from __future__ import annotations

import math
from typing import Iterable, List, Tuple, Union

import numpy as np

Number = Union[int, float]
Interval = Tuple[float, float]

# Thresholds for picking a 1/2/5/10 tick step (same as d3-array).
_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


# ============================================================
# Domain algorithms
# ============================================================

def _as_array(values: Iterable[Number]) -> np.ndarray:
    return np.asarray(list(values) if not hasattr(values, "__array__") else values, dtype=float)


def extent(values: Iterable[Number]) -> Interval:
    """[min, max] of ``values``, skipping NaN. Empty input gives (nan, nan)."""
    arr = _as_array(values)
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        return (math.nan, math.nan)
    return (float(arr.min()), float(arr.max()))


def zero_floored(values: Iterable[Number]) -> Interval:
    """[0, max] of ``values``, skipping NaN; the upper bound never drops below 0."""
    arr = _as_array(values)
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        return (0.0, 0.0)
    return (0.0, max(float(arr.max()), 0.0))


# ============================================================
# Ticks
# ============================================================

def tick_increment(start: float, stop: float, count: int) -> float:
    """Signed tick step; negative values encode 1/step to avoid float drift."""
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power >= 0:
        return factor * 10 ** power
    return -(10 ** -power) / factor


def ticks(start: float, stop: float, count: int = 10) -> List[float]:
    if not (math.isfinite(start) and math.isfinite(stop)) or count <= 0:
        return []
    if start == stop:
        return [float(start)]
    lo, hi = min(start, stop), max(start, stop)
    inc = tick_increment(lo, hi, count)
    if inc == 0 or not math.isfinite(inc):
        return []
    if inc > 0:
        i0, i1 = math.ceil(lo / inc), math.floor(hi / inc)
        values = [float(i * inc) for i in range(i0, i1 + 1)]
    else:
        inv = -inc
        i0, i1 = math.ceil(lo * inv), math.floor(hi * inv)
        values = [i / inv for i in range(i0, i1 + 1)]
    return values if start <= stop else values[::-1]


def tick_step(start: float, stop: float, count: int = 10) -> float:
    if not (math.isfinite(start) and math.isfinite(stop)) or start == stop:
        return 1.0
    inc = tick_increment(min(start, stop), max(start, stop), count)
    return inc if inc > 0 else 1 / -inc


def tick_format(value: float, step: float) -> str:
    """Fixed-point label with thousands separators and step-derived precision."""
    precision = max(0, -math.floor(math.log10(abs(step)))) if step else 0
    return f"{value:,.{precision}f}"


# ============================================================
# Linear scale
# ============================================================

class LinearScale:
    """Maps a numeric domain onto a pixel range.

    The domain is mutated in place when the axis selection changes; the
    range is fixed when the chart is built.
    """

    def __init__(self, domain: Interval, range_: Interval):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __repr__(self) -> str:
        return f"LinearScale(domain={self.domain}, range={self.range})"

    def __call__(self, values):
        d0, d1 = self.domain
        r0, r1 = self.range
        arr = np.asarray(values, dtype=float)
        span = d1 - d0
        if math.isnan(span):
            t = np.full_like(arr, math.nan)
        elif span == 0:
            t = np.full_like(arr, 0.5)
        else:
            t = (arr - d0) / span
        out = r0 + t * (r1 - r0)
        return float(out) if out.ndim == 0 else out

    def ticks(self, count: int = 10) -> List[float]:
        return ticks(self.domain[0], self.domain[1], count)

    def tick_labels(self, count: int = 10) -> List[str]:
        step = tick_step(self.domain[0], self.domain[1], count)
        return [tick_format(v, step) for v in self.ticks(count)]
