from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

Point = tuple[int, int]


@dataclass(frozen=True)
class CoordinateMap:
    """Row-major (x, y) positions of a width x height grid; index i is (i % w, i // w)."""

    width: int
    height: int
    points: tuple[Point, ...]

    @classmethod
    def build(cls, width: int, height: int) -> CoordinateMap:
        points = tuple((x, y) for y in range(height) for x in range(width))
        return cls(width=width, height=height, points=points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Point:
        return self.points[index]
