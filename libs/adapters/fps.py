from __future__ import annotations

import time
from collections import deque


class RollingFps:
    """Counts ticks seen during the last second."""

    def __init__(self, window_s: float = 1.0) -> None:
        self._window = window_s
        self._times: deque[float] = deque()

    def _expire(self, now: float) -> None:
        while self._times and now - self._times[0] > self._window:
            self._times.popleft()

    def tick(self) -> None:
        now = time.perf_counter()
        self._times.append(now)
        # bounded even when value() is never read
        self._expire(now)

    def value(self) -> float:
        self._expire(time.perf_counter())
        return float(len(self._times))

    def clear(self) -> None:
        self._times.clear()
