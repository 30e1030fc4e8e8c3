from __future__ import annotations

from typing import Final

from pydantic import BaseModel, Field

# First part of every two-part transport message.
FRAME_KIND: Final = b"frame"
TEXT_KIND: Final = b"text"

BYTES_PER_PIXEL: Final = 3


class StreamGeometry(BaseModel):
    """Resolution both ends agree on; frames carry no header of their own."""

    width: int = Field(default=160, gt=0)
    height: int = Field(default=48, gt=0)

    @property
    def frame_bytes(self) -> int:
        return self.width * self.height * BYTES_PER_PIXEL
