from .canvas import MARKERS, GridCanvas
from .fakes import RecordingCanvas, RecordingSurface, ScriptedKeys
from .keys import KeyQueue
from .surface import GridSurface

__all__ = [
    "MARKERS",
    "GridCanvas",
    "GridSurface",
    "KeyQueue",
    "RecordingCanvas",
    "RecordingSurface",
    "ScriptedKeys",
]
