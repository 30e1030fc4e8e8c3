from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Protocol

RGB = tuple[int, int, int]


class CanvasPort(Protocol):
    def draw(self, x: float, y: float, color: RGB) -> None: ...


class SurfacePort(ABC):
    """Display that lends a canvas for one render pass, then shows it."""

    @abstractmethod
    def present(self, paint: Callable[[CanvasPort], object]) -> None: ...
