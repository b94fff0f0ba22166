"""Cell-grid render target.

Views paint styled spans into a ``Surface`` addressed by absolute cell
coordinates; the host then serialises it into terminal lines.  Painting is
clipped to the surface area, so views may hand it rectangles that extend past
the visible region.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from pi.prefs.geometry import Rect
from pi.prefs.utils import TAB_WIDTH, grapheme_width, graphemes

Style = Callable[[str], str]

# Marker for the trailing cells covered by a wide grapheme
_CONTINUATION = ""


@dataclass(frozen=True)
class Span:
    """A run of text with an optional styling function."""

    content: str
    style: Style | None = None


@dataclass
class Cell:
    symbol: str = " "
    style: Style | None = None


class Surface:
    """A rectangular buffer of cells."""

    def __init__(self, area: Rect) -> None:
        self.area = area
        self._rows: list[list[Cell]] = [
            [Cell() for _ in range(area.width)] for _ in range(area.height)
        ]

    # -- Cell access ---------------------------------------------------------

    def cell(self, col: int, row: int) -> Cell:
        """Return the cell at absolute coordinates (*col*, *row*)."""
        if not self.area.contains(col, row):
            raise IndexError(f"({col}, {row}) is outside {self.area!r}")
        return self._rows[row - self.area.y][col - self.area.x]

    # -- Painting ------------------------------------------------------------

    def clear(self, rect: Rect) -> None:
        """Reset every cell of *rect* (clipped) to an unstyled blank."""
        clip = rect.intersection(self.area)
        for row in range(clip.y, clip.bottom):
            cells = self._rows[row - self.area.y]
            for col in range(clip.x, clip.right):
                cells[col - self.area.x] = Cell()

    def set_spans(self, x: int, y: int, spans: Iterable[Span], max_width: int) -> int:
        """Paint *spans* left to right starting at (*x*, *y*).

        At most *max_width* columns are written; a wide grapheme that does not
        fit entirely is dropped.  Returns the number of columns written.
        """
        if y < self.area.y or y >= self.area.bottom:
            return 0
        limit = min(x + max(0, max_width), self.area.right)
        col = x
        for span in spans:
            for g in graphemes(span.content):
                if g == "\t":
                    g = " " * TAB_WIDTH
                    for ch in g:
                        if col + 1 > limit:
                            return col - x
                        self._put(col, y, ch, 1, span.style)
                        col += 1
                    continue
                width = grapheme_width(g)
                if width == 0:
                    continue
                if col + width > limit:
                    return col - x
                self._put(col, y, g, width, span.style)
                col += width
        return col - x

    def set_string(
        self,
        x: int,
        y: int,
        text: str,
        style: Style | None = None,
        max_width: int | None = None,
    ) -> int:
        """Paint a single styled string; see :meth:`set_spans`."""
        if max_width is None:
            max_width = self.area.right - x
        return self.set_spans(x, y, [Span(text, style)], max_width)

    def render_line(self, rect: Rect, spans: Iterable[Span]) -> None:
        """Paint *spans* on the first row of *rect*, clipped to its width."""
        if rect.is_empty():
            return
        self.set_spans(rect.x, rect.y, spans, rect.width)

    def _put(self, col: int, row: int, symbol: str, width: int, style: Style | None) -> None:
        if col < self.area.x:
            return
        cells = self._rows[row - self.area.y]
        cells[col - self.area.x] = Cell(symbol, style)
        for extra in range(1, width):
            cells[col + extra - self.area.x] = Cell(_CONTINUATION, style)

    # -- Serialisation -------------------------------------------------------

    def plain_lines(self) -> list[str]:
        """Return the surface content without styling."""
        return ["".join(cell.symbol for cell in cells) for cells in self._rows]

    def to_lines(self, cursor: tuple[int, int] | None = None, marker: str = "") -> list[str]:
        """Return styled terminal lines.

        Consecutive cells sharing a style are wrapped together.  When *cursor*
        is given, *marker* is inserted before the cell at that position.
        """
        lines: list[str] = []
        for row_index, cells in enumerate(self._rows):
            row = self.area.y + row_index
            parts: list[str] = []
            run: list[str] = []
            run_style: Style | None = None

            def flush() -> None:
                if run:
                    text = "".join(run)
                    parts.append(run_style(text) if run_style else text)
                    run.clear()

            for col_index, cell in enumerate(cells):
                col = self.area.x + col_index
                if cursor is not None and marker and cursor == (col, row):
                    flush()
                    parts.append(marker)
                if cell.style is not run_style:
                    flush()
                    run_style = cell.style
                run.append(cell.symbol)
            flush()
            lines.append("".join(parts))
        return lines
