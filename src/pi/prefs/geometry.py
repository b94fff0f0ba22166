"""Screen rectangles measured in terminal cells."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle of terminal cells.

    Coordinates and sizes are non-negative; ``x``/``y`` address the top-left
    cell.
    """

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if min(self.x, self.y, self.width, self.height) < 0:
            raise ValueError(f"Rect fields must be non-negative: {self!r}")

    @property
    def right(self) -> int:
        """Column just past the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Row just past the bottom edge."""
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def contains(self, col: int, row: int) -> bool:
        return self.x <= col < self.right and self.y <= row < self.bottom

    def intersection(self, other: Rect) -> Rect:
        """Return the overlap of two rectangles (possibly empty)."""
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        return Rect(x, y, max(0, right - x), max(0, bottom - y))

    def row(self, y: int, height: int = 1) -> Rect:
        """Full-width band of *height* rows starting at *y*, clipped to ``self``."""
        return Rect(self.x, y, self.width, height).intersection(self)
