from __future__ import annotations

import cv2
import numpy as np
from ports.vision import Frame, ResizePort


class Cv2Resizer(ResizePort):
    """Downsample to the stream geometry; output is contiguous BGR bytes."""

    def __init__(self, interpolation: int = cv2.INTER_LINEAR) -> None:
        self._interpolation = int(interpolation)

    def resize(self, frame: Frame, width: int, height: int) -> bytes:
        image = np.frombuffer(frame.data, dtype=np.uint8).reshape(
            frame.height, frame.width, frame.channels
        )
        if frame.channels == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
        resized = cv2.resize(image, (width, height), interpolation=self._interpolation)
        return np.ascontiguousarray(resized).tobytes()
