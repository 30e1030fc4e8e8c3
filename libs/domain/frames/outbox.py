from __future__ import annotations

import threading


class Outbox:
    """Single-slot hand-off from the producer thread to the thread that owns the socket."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: bytes | None = None
        self.overwritten = 0

    def put(self, data: bytes) -> None:
        with self._lock:
            if self._pending is not None:
                self.overwritten += 1
            self._pending = data

    def take(self) -> bytes | None:
        with self._lock:
            data, self._pending = self._pending, None
            return data
