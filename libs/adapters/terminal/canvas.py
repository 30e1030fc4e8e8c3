from __future__ import annotations

from rich.style import Style
from rich.text import Text
from ports.canvas import RGB

MARKERS = {"dot": "•", "block": "█"}


class GridCanvas:
    """
    Terminal cell grid addressed in canvas coordinates. x grows right, y grows
    up; points outside the bounds are dropped and the last draw into a cell wins.
    """

    def __init__(
        self,
        cols: int,
        rows: int,
        x_bounds: tuple[float, float],
        y_bounds: tuple[float, float],
    ) -> None:
        self.cols = max(0, int(cols))
        self.rows = max(0, int(rows))
        self.x_bounds = x_bounds
        self.y_bounds = y_bounds
        self.cells: list[list[RGB | None]] = [[None] * self.cols for _ in range(self.rows)]

    def get_point(self, x: float, y: float) -> tuple[int, int] | None:
        left, right = self.x_bounds
        bottom, top = self.y_bounds
        if x < left or x > right or y < bottom or y > top:
            return None
        dx = right - left
        dy = top - bottom
        if dx == 0 or dy == 0 or self.cols == 0 or self.rows == 0:
            return None
        col = int((x - left) * (self.cols - 1) / dx)
        row = int((top - y) * (self.rows - 1) / dy)
        return col, row

    def draw(self, x: float, y: float, color: RGB) -> None:
        point = self.get_point(x, y)
        if point is not None:
            col, row = point
            self.cells[row][col] = color

    def to_text(self, marker: str = "dot") -> Text:
        glyph = MARKERS.get(marker, marker)
        styles: dict[RGB, Style] = {}
        text = Text(no_wrap=True, overflow="crop")
        for r, line in enumerate(self.cells):
            if r:
                text.append("\n")
            for color in line:
                if color is None:
                    text.append(" ")
                    continue
                style = styles.get(color)
                if style is None:
                    style = styles[color] = Style(color="rgb({},{},{})".format(*color))
                text.append(glyph, style=style)
        return text
