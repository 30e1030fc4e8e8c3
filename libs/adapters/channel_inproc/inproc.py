from __future__ import annotations

import threading
from queue import Empty, Full, Queue
from time import monotonic, sleep

from ports.channel import ConnectionPort, Message
from ports.errors import ConnectError, ConnectionClosed, ListenError

_QUEUE_DEPTH = 2


class InprocConnection(ConnectionPort):
    """One end of an in-process link; both ends share a closed flag."""

    def __init__(
        self, inbox: Queue[Message], outbox: Queue[Message], link_down: threading.Event, name: str
    ) -> None:
        self._inbox = inbox
        self._outbox = outbox
        self._link_down = link_down
        self.name = name

    @classmethod
    def pair(cls, name: str = "inproc") -> tuple[InprocConnection, InprocConnection]:
        a_to_b: Queue[Message] = Queue(maxsize=_QUEUE_DEPTH)
        b_to_a: Queue[Message] = Queue(maxsize=_QUEUE_DEPTH)
        down = threading.Event()
        return cls(b_to_a, a_to_b, down, name), cls(a_to_b, b_to_a, down, name)

    @property
    def closed(self) -> bool:
        return self._link_down.is_set()

    def _ensure_open(self) -> None:
        if self._link_down.is_set():
            raise ConnectionClosed(f"{self.name} is closed")

    def _put(self, msg: Message) -> bool:
        self._ensure_open()
        try:
            self._outbox.put_nowait(msg)
        except Full:
            return False
        return True

    def send_binary(self, data: bytes) -> bool:
        return self._put(Message(kind="binary", payload=bytes(data)))

    def send_text(self, text: str) -> None:
        self._put(Message(kind="text", payload=text))

    def recv(self, timeout_ms: int = 100) -> Message | None:
        self._ensure_open()
        try:
            return self._inbox.get(timeout=max(0, timeout_ms) / 1000.0)
        except Empty:
            return None

    def close(self) -> None:
        self._link_down.set()


class _Pending:
    __slots__ = ("ready", "conn")

    def __init__(self) -> None:
        self.ready = threading.Event()
        self.conn: InprocConnection | None = None


class InprocChannel:
    """Address registry so listen()/connect() can pair up inside one process."""

    _lock = threading.Lock()
    _listeners: dict[str, _Pending] = {}

    @classmethod
    def listen(cls, addr: str, accept_timeout_ms: int | None = None) -> InprocConnection:
        pending = _Pending()
        with cls._lock:
            if addr in cls._listeners:
                raise ListenError(f"{addr} is already in use")
            cls._listeners[addr] = pending
        timeout = None if accept_timeout_ms is None else accept_timeout_ms / 1000.0
        if not pending.ready.wait(timeout):
            with cls._lock:
                unclaimed = cls._listeners.get(addr) is pending
                if unclaimed:
                    del cls._listeners[addr]
            if unclaimed:
                raise ListenError(f"no peer connected to {addr}")
            # a connect() claimed us while the wait timed out
            pending.ready.wait()
        assert pending.conn is not None
        return pending.conn

    @classmethod
    def connect(cls, addr: str, timeout_ms: int = 2000) -> InprocConnection:
        deadline = monotonic() + timeout_ms / 1000.0
        while True:
            with cls._lock:
                pending = cls._listeners.pop(addr, None)
            if pending is not None:
                break
            if monotonic() >= deadline:
                raise ConnectError(f"nothing listening on {addr}")
            sleep(0.01)
        server_end, client_end = InprocConnection.pair(name=addr)
        pending.conn = server_end
        pending.ready.set()
        return client_end
