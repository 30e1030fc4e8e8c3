from .canvas import RGB, CanvasPort, SurfacePort
from .channel import ConnectionPort, Message, MessageKind
from .errors import (
    ChannelError,
    ConnectError,
    ConnectionClosed,
    DeviceUnavailable,
    FrameSizeError,
    ListenError,
    ReadError,
    StreamError,
)
from .input import KeyInputPort
from .vision import CapturePort, Frame, ResizePort

__all__ = [
    "RGB",
    "CanvasPort",
    "SurfacePort",
    "KeyInputPort",
    "CapturePort",
    "ResizePort",
    "Frame",
    "ConnectionPort",
    "Message",
    "MessageKind",
    "StreamError",
    "DeviceUnavailable",
    "ReadError",
    "ChannelError",
    "ListenError",
    "ConnectError",
    "ConnectionClosed",
    "FrameSizeError",
]
