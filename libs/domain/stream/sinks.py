from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from domain.frames import FrameBuffer, Outbox, SharedFrameState
from ports.channel import ConnectionPort
from ports.errors import ConnectionClosed


class FrameSink(ABC):
    """Where the producer hands each resized frame."""

    @abstractmethod
    def emit(self, buffer: FrameBuffer) -> None: ...

    def close(self) -> None:
        pass


class LocalSink(FrameSink):
    def __init__(self, state: SharedFrameState) -> None:
        self.state = state

    def emit(self, buffer: FrameBuffer) -> None:
        self.state.replace(buffer)


class NetworkSink(FrameSink):
    """
    Queues the frame for the pump that owns the connection; the pump sends it
    as one binary message. Closing fires the session's cancel signal so the
    pump closes the link from its own thread.
    """

    def __init__(self, outbox: Outbox, link: ConnectionPort, cancel: threading.Event) -> None:
        self.outbox = outbox
        self.link = link
        self.cancel = cancel

    def emit(self, buffer: FrameBuffer) -> None:
        if self.link.closed:
            raise ConnectionClosed("peer disconnected")
        self.outbox.put(buffer.pixels)

    def close(self) -> None:
        self.cancel.set()
