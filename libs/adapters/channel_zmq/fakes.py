from __future__ import annotations

from collections.abc import Iterable
from queue import Empty, SimpleQueue

from ports.channel import ConnectionPort, Message
from ports.errors import ConnectionClosed


class FakeConnection(ConnectionPort):
    """Records outbound messages; inbound ones are injected by the test."""

    def __init__(self, inbound: Iterable[Message] = (), backpressure: bool = False) -> None:
        self.sent_binary: list[bytes] = []
        self.sent_text: list[str] = []
        self.backpressure = backpressure
        self.close_calls = 0
        self._closed = False
        self._q: SimpleQueue[Message] = SimpleQueue()
        for msg in inbound:
            self._q.put(msg)

    @property
    def closed(self) -> bool:
        return self._closed

    def send_binary(self, data: bytes) -> bool:
        if self._closed:
            raise ConnectionClosed("fake link closed")
        if self.backpressure:
            return False
        self.sent_binary.append(bytes(data))
        return True

    def send_text(self, text: str) -> None:
        if self._closed:
            raise ConnectionClosed("fake link closed")
        self.sent_text.append(text)

    def recv(self, timeout_ms: int = 100) -> Message | None:
        if self._closed:
            raise ConnectionClosed("fake link closed")
        try:
            return self._q.get(timeout=timeout_ms / 1000.0)
        except Empty:
            return None

    def close(self) -> None:
        self.close_calls += 1
        self._closed = True

    # Test/helper API
    def inject(self, msg: Message) -> None:
        self._q.put(msg)

    def drop_peer(self) -> None:
        self._closed = True
