from __future__ import annotations

import time
from collections.abc import Callable, Iterable

from ports.canvas import RGB, CanvasPort, SurfacePort
from ports.input import KeyInputPort


class RecordingCanvas:
    """Keeps every draw call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[float, float, RGB]] = []

    def draw(self, x: float, y: float, color: RGB) -> None:
        self.calls.append((x, y, color))


class RecordingSurface(SurfacePort):
    def __init__(self) -> None:
        self.passes: list[RecordingCanvas] = []

    def present(self, paint: Callable[[CanvasPort], object]) -> None:
        canvas = RecordingCanvas()
        paint(canvas)
        self.passes.append(canvas)


class ScriptedKeys(KeyInputPort):
    """Returns scripted keys one per poll (None means "no key"), then idles like a real terminal."""

    def __init__(self, keys: Iterable[str | None] = ()) -> None:
        self._keys = list(keys)
        self.polls = 0

    def poll(self, timeout_s: float) -> str | None:
        self.polls += 1
        if self._keys:
            return self._keys.pop(0)
        time.sleep(timeout_s)
        return None
