# libs/ports/vision.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Frame:
    width: int
    height: int
    channels: int
    # raw bytes (row-major, BGR or BGRA). Keep it tech-agnostic.
    data: bytes


class CapturePort(Protocol):
    def open(self) -> None: ...  # raises DeviceUnavailable
    def read(self) -> Frame: ...  # raises ReadError
    def fps(self) -> float: ...
    def close(self) -> None: ...


class ResizePort(Protocol):
    def resize(self, frame: Frame, width: int, height: int) -> bytes: ...  # BGR, w*h*3
