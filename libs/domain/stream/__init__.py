from .consumer import RenderConsumer
from .producer import CaptureProducer
from .pump import ChannelPump
from .sinks import FrameSink, LocalSink, NetworkSink

__all__ = [
    "CaptureProducer",
    "ChannelPump",
    "FrameSink",
    "LocalSink",
    "NetworkSink",
    "RenderConsumer",
]
