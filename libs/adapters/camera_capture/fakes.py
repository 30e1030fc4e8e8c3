from __future__ import annotations

from collections.abc import Iterable

from ports.errors import DeviceUnavailable, ReadError
from ports.vision import CapturePort, Frame, ResizePort


def solid_frame(width: int, height: int, bgr: tuple[int, int, int]) -> Frame:
    return Frame(width=width, height=height, channels=3, data=bytes(bgr) * (width * height))


class FakeCapturePort(CapturePort):
    """
    Plays back scripted frames. A None entry in the script raises ReadError for
    that tick; once the script runs out the last frame repeats.
    """

    def __init__(
        self,
        script: Iterable[Frame | None] = (),
        available: bool = True,
        fps_value: float = 30.0,
    ) -> None:
        self._script = list(script)
        self._available = available
        self._fps = float(fps_value)
        self._last: Frame = solid_frame(4, 4, (0, 0, 0))
        self.opened = False
        self.closed = False
        self.reads = 0

    def open(self) -> None:
        if not self._available:
            raise DeviceUnavailable("fake device unavailable")
        self.opened = True

    def read(self) -> Frame:
        self.reads += 1
        if self._script:
            item = self._script.pop(0)
            if item is None:
                raise ReadError("scripted read failure")
            self._last = item
        return self._last

    def fps(self) -> float:
        return self._fps

    def close(self) -> None:
        self.closed = True


class FakeResizer(ResizePort):
    """Nearest-neighbour resize in plain Python; enough for tiny test frames."""

    def resize(self, frame: Frame, width: int, height: int) -> bytes:
        out = bytearray()
        ch = frame.channels
        for y in range(height):
            sy = y * frame.height // height
            for x in range(width):
                sx = x * frame.width // width
                o = (sy * frame.width + sx) * ch
                out += frame.data[o : o + 3]
        return bytes(out)
