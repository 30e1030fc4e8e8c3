from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from typing import Final

from domain.frames import SharedFrameState
from ports.canvas import CanvasPort, SurfacePort
from ports.input import KeyInputPort

LOG: Final = logging.getLogger("termvid.render")


class RenderConsumer:
    """Fixed-tick loop: poll for quit, then redraw the latest frame in full."""

    def __init__(
        self,
        state: SharedFrameState,
        tick_ms: float = 10.0,
        quit_keys: Iterable[str] = ("q",),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.state: Final = state
        self.tick_s = max(1.0, tick_ms) / 1000.0
        self.quit_keys = frozenset(quit_keys)
        self._clock = clock
        self.ticks = 0

    @property
    def x_bounds(self) -> tuple[float, float]:
        return -self.state.width / 2.0, self.state.width / 2.0

    @property
    def y_bounds(self) -> tuple[float, float]:
        return -self.state.height / 2.0, self.state.height / 2.0

    def paint(self, canvas: CanvasPort) -> int:
        """Draw every grid position of the current snapshot. Returns the draw count."""
        buffer = self.state.snapshot()
        left = -buffer.width / 2.0
        top = buffer.height / 2.0
        n = 0
        for x, y in self.state.coords:
            color = buffer.rgb_at(buffer.offset(x, y))
            # canvas origin is centred; image rows grow downwards
            canvas.draw(x + left, -y + top, color)
            n += 1
        return n

    def run(self, surface: SurfacePort, keys: KeyInputPort, cancel: threading.Event) -> None:
        last_tick = self._clock()
        while not cancel.is_set():
            timeout = max(0.0, self.tick_s - (self._clock() - last_tick))
            key = keys.poll(timeout)
            if key is not None and key in self.quit_keys:
                LOG.info("quit requested")
                cancel.set()
                break
            if cancel.is_set():
                break
            surface.present(self.paint)
            self.ticks += 1
            if self._clock() - last_tick >= self.tick_s:
                last_tick = self._clock()
