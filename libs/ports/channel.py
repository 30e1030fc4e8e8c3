from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

MessageKind = Literal["binary", "text"]


@dataclass(frozen=True)
class Message:
    kind: MessageKind
    payload: bytes | str


class ConnectionPort(ABC):
    """One established link. Confined to a single thread (the pump)."""

    @abstractmethod
    def send_binary(self, data: bytes) -> bool:
        """One binary message. False when dropped under backpressure; raises ConnectionClosed."""

    @abstractmethod
    def send_text(self, text: str) -> None: ...

    @abstractmethod
    def recv(self, timeout_ms: int = 100) -> Message | None: ...

    @property
    @abstractmethod
    def closed(self) -> bool: ...

    @abstractmethod
    def close(self) -> None: ...


__all__ = ["ConnectionPort", "Message", "MessageKind"]
