from __future__ import annotations

import threading
from collections.abc import Callable

from ports.canvas import CanvasPort, SurfacePort

from .canvas import GridCanvas


class GridSurface(SurfacePort):
    """
    Paints into a fresh GridCanvas sized by `size()` and keeps only the newest
    finished canvas; the UI thread collects it with take().
    """

    def __init__(
        self,
        size: Callable[[], tuple[int, int]],
        x_bounds: tuple[float, float],
        y_bounds: tuple[float, float],
    ) -> None:
        self._size = size
        self.x_bounds = x_bounds
        self.y_bounds = y_bounds
        self._lock = threading.Lock()
        self._latest: GridCanvas | None = None
        self.presented = 0

    def present(self, paint: Callable[[CanvasPort], object]) -> None:
        cols, rows = self._size()
        if cols <= 0 or rows <= 0:
            return
        canvas = GridCanvas(cols, rows, self.x_bounds, self.y_bounds)
        paint(canvas)
        with self._lock:
            self._latest = canvas
            self.presented += 1

    def take(self) -> GridCanvas | None:
        with self._lock:
            canvas, self._latest = self._latest, None
            return canvas
