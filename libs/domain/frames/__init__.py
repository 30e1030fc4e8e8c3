from .buffer import BYTES_PER_PIXEL, FrameBuffer, frame_len
from .coordinate_map import CoordinateMap
from .outbox import Outbox
from .shared import SharedFrameState

__all__ = [
    "BYTES_PER_PIXEL",
    "CoordinateMap",
    "FrameBuffer",
    "Outbox",
    "SharedFrameState",
    "frame_len",
]
