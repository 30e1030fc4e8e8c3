from __future__ import annotations

import logging
from typing import Final

import cv2
from adapters.fps import RollingFps
from ports.errors import DeviceUnavailable, ReadError
from ports.vision import CapturePort, Frame

LOG: Final = logging.getLogger("termvid.capture.opencv")


class OpenCVCapture(CapturePort):
    """Camera by index through cv2.VideoCapture. Frames come out BGR."""

    def __init__(self, device: int = 0, backend: int = cv2.CAP_ANY) -> None:
        self._device = int(device)
        self._backend = int(backend)
        self._cap: cv2.VideoCapture | None = None
        self._fps = RollingFps()

    def open(self) -> None:
        cap = cv2.VideoCapture(self._device, self._backend)
        if not cap.isOpened():
            cap.release()
            raise DeviceUnavailable(f"unable to open camera {self._device}")
        self._cap = cap
        LOG.info("camera %d opened", self._device)

    def read(self) -> Frame:
        if self._cap is None:
            raise ReadError("camera is not open")
        ok, image = self._cap.read()
        if not ok or image is None:
            raise ReadError(f"camera {self._device} returned no frame")
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        height, width = image.shape[:2]
        self._fps.tick()
        return Frame(width=width, height=height, channels=image.shape[2], data=image.tobytes())

    def fps(self) -> float:
        return self._fps.value()

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
        self._cap = None
        self._fps.clear()
