from __future__ import annotations

import logging
import time
from typing import Any, Final, cast

import mss
from mss.exception import ScreenShotError
from adapters.fps import RollingFps
from ports.errors import DeviceUnavailable, ReadError
from ports.vision import CapturePort, Frame

LOG: Final = logging.getLogger("termvid.capture.mss")


class MSSCapture(CapturePort):
    """Screen monitor as a capture device. Frames come out BGRA."""

    def __init__(self, monitor: int = 1, target_fps: float = 30.0) -> None:
        self._monitor_idx = int(monitor)
        self._target_fps = float(target_fps)
        self._sct: Any = None
        self._mon: dict[str, int] | None = None
        self._fps = RollingFps()

    def open(self) -> None:
        try:
            sct = mss.mss()
        except ScreenShotError as ex:
            raise DeviceUnavailable(f"no screen to capture: {ex}") from ex
        monitors = sct.monitors
        # clamp to a real monitor (monitors[0] is "all")
        idx = self._monitor_idx
        if idx < 1 or idx >= len(monitors):
            idx = 1
        if idx >= len(monitors):
            sct.close()
            raise DeviceUnavailable("no monitor available")
        self._sct = sct
        self._mon = cast(dict[str, int], dict(monitors[idx]))
        LOG.info("monitor %d opened: %sx%s", idx, self._mon["width"], self._mon["height"])

    def read(self) -> Frame:
        if self._sct is None or self._mon is None:
            raise ReadError("screen capture is not open")
        try:
            shot = self._sct.grab(self._mon)
        except ScreenShotError as ex:
            raise ReadError(str(ex)) from ex
        frame = Frame(width=shot.width, height=shot.height, channels=4, data=bytes(shot.bgra))
        self._maybe_sleep()
        self._fps.tick()
        return frame

    def fps(self) -> float:
        return self._fps.value()

    def close(self) -> None:
        if self._sct is not None:
            self._sct.close()
        self._sct = None
        self._mon = None
        self._fps.clear()

    def _maybe_sleep(self) -> None:
        if self._target_fps > 0:
            time.sleep(max(0.0, (1.0 / self._target_fps) * 0.25))
