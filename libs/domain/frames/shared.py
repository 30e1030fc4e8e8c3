from __future__ import annotations

import threading

from ports.errors import FrameSizeError
from shared.contracts.v1.stream import StreamGeometry

from .buffer import FrameBuffer
from .coordinate_map import CoordinateMap


class SharedFrameState:
    """
    Latest-wins cell shared by one frame writer and one render loop.
    replace() and snapshot() run in the same critical section, so a reader sees
    either the old or the new buffer, never a torn one.
    """

    def __init__(self, width: int, height: int, initial: FrameBuffer | None = None) -> None:
        self.geometry = StreamGeometry(width=width, height=height)
        self.width = width
        self.height = height
        self.coords = CoordinateMap.build(width, height)
        self._lock = threading.Lock()
        self._buffer = initial or FrameBuffer.placeholder(width, height)
        self._check(self._buffer)
        self._generation = 0

    @classmethod
    def from_geometry(cls, geometry: StreamGeometry) -> SharedFrameState:
        return cls(geometry.width, geometry.height)

    def _check(self, buffer: FrameBuffer) -> None:
        if (buffer.width, buffer.height) != (self.width, self.height):
            raise FrameSizeError(
                f"buffer is {buffer.width}x{buffer.height}, state is {self.width}x{self.height}"
            )

    def replace(self, buffer: FrameBuffer) -> None:
        self._check(buffer)
        with self._lock:
            self._buffer = buffer
            self._generation += 1

    def snapshot(self) -> FrameBuffer:
        # FrameBuffer is immutable; the reference stays valid for a whole render pass.
        with self._lock:
            return self._buffer

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation
