from __future__ import annotations

from abc import ABC, abstractmethod


class KeyInputPort(ABC):
    """Terminal key presses; domain never sees the TUI toolkit directly."""

    @abstractmethod
    def poll(self, timeout_s: float) -> str | None:
        """The key name, or None when nothing arrived within timeout_s."""
