"""
Time-bounded interpolations for axis and marker movement.

A Transition runs from ``start`` to ``end`` over ``duration_ms`` with cubic
in-out easing. A new trigger while one is running replaces it via
``retarget``, starting from wherever the old one had got to.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

DEFAULT_DURATION_MS = 1000


def ease_cubic_in_out(t):
    t = np.clip(np.asarray(t, dtype=float), 0.0, 1.0) * 2
    return np.where(t <= 1, t ** 3, (t - 2) ** 3 + 2) / 2


@dataclass
class Transition:
    start: np.ndarray
    end: np.ndarray
    duration_ms: int = DEFAULT_DURATION_MS
    started_at: float = field(default_factory=time.monotonic)

    def __post_init__(self):
        self.start = np.asarray(self.start, dtype=float)
        self.end = np.asarray(self.end, dtype=float)
        if self.start.shape != self.end.shape:
            raise ValueError(
                f"Transition endpoints differ in shape: {self.start.shape} vs {self.end.shape}"
            )

    def progress(self, now: Optional[float] = None) -> float:
        if self.duration_ms <= 0:
            return 1.0
        now = time.monotonic() if now is None else now
        elapsed_ms = (now - self.started_at) * 1000.0
        return float(min(max(elapsed_ms / self.duration_ms, 0.0), 1.0))

    def done(self, now: Optional[float] = None) -> bool:
        return self.progress(now) >= 1.0

    def at(self, t: float) -> np.ndarray:
        """Interpolated value at normalized time ``t``; the ends are exact."""
        if t <= 0:
            return self.start.copy()
        if t >= 1:
            return self.end.copy()
        return self.start + (self.end - self.start) * ease_cubic_in_out(t)

    def value(self, now: Optional[float] = None) -> np.ndarray:
        return self.at(self.progress(now))


def retarget(
    current: Optional[Transition],
    fallback_start,
    end,
    duration_ms: int = DEFAULT_DURATION_MS,
    now: Optional[float] = None,
) -> Transition:
    """Starts a transition to ``end``, replacing ``current`` if it is still running."""
    now = time.monotonic() if now is None else now
    start = fallback_start
    if current is not None and not current.done(now):
        start = current.value(now)
    return Transition(start=start, end=end, duration_ms=duration_ms, started_at=now)
