from __future__ import annotations

from queue import Empty, SimpleQueue

from ports.input import KeyInputPort


class KeyQueue(KeyInputPort):
    """Keys pushed by the UI thread, polled by the render loop."""

    def __init__(self) -> None:
        self._q: SimpleQueue[str] = SimpleQueue()

    def push(self, key: str) -> None:
        self._q.put(key)

    def poll(self, timeout_s: float) -> str | None:
        try:
            return self._q.get(timeout=max(0.0, timeout_s))
        except Empty:
            return None
