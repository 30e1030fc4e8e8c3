from __future__ import annotations

from dataclasses import dataclass

from ports.canvas import RGB
from ports.errors import FrameSizeError
from shared.contracts.v1.stream import BYTES_PER_PIXEL


def frame_len(width: int, height: int) -> int:
    return width * height * BYTES_PER_PIXEL


@dataclass(frozen=True)
class FrameBuffer:
    """One resized frame: B,G,R bytes, row-major. Replaced wholesale, never mutated."""

    pixels: bytes
    width: int
    height: int

    def __post_init__(self) -> None:
        expected = frame_len(self.width, self.height)
        if len(self.pixels) != expected:
            raise FrameSizeError(
                f"frame is {len(self.pixels)} bytes, expected {expected} "
                f"for {self.width}x{self.height}"
            )

    @classmethod
    def placeholder(cls, width: int, height: int) -> FrameBuffer:
        """Gradient fill shown until the first real frame arrives."""
        n = frame_len(width, height)
        return cls(pixels=bytes(i % 256 for i in range(n)), width=width, height=height)

    def offset(self, x: int, y: int) -> int:
        return BYTES_PER_PIXEL * (x + self.width * y)

    def rgb_at(self, offset: int) -> RGB:
        p = self.pixels
        # stored B,G,R
        return p[offset + 2], p[offset + 1], p[offset]

    def pixel(self, x: int, y: int) -> RGB:
        return self.rgb_at(self.offset(x, y))
