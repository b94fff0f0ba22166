"""Geometry of the preferences pane.

Pure functions of the available rectangle and the text area's wrapped
height.  The pane is laid out top to bottom as::

    ▌ title
    ▌ path
    ▌ status
    ▌                 <- editor block: one blank row ...
    ▌ text area       <- ... then 4-18 rows of text
    ▌ ...
                      <- spacer
    ▌ hint
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from pi.prefs.geometry import Rect

GUTTER = "▌ "
GUTTER_WIDTH = 2

MIN_TEXT_ROWS = 4
MAX_TEXT_ROWS = 18

# Blank row at the top of the editor block
EDITOR_PADDING_ROWS = 1
# Title, path, status, spacer and hint
CHROME_ROWS = 5
HEADER_ROWS = 3

MIN_TEXT_AREA_WIDTH = 4
TEXT_AREA_OFFSET_X = GUTTER_WIDTH
TEXT_AREA_OFFSET_Y = HEADER_ROWS + EDITOR_PADDING_ROWS


class Measurable(Protocol):
    def desired_height(self, width: int) -> int: ...


@dataclass(frozen=True)
class PaneLayout:
    """Row bands of the pane; a band is ``None`` when it falls outside the area."""

    title: Rect | None
    path: Rect | None
    status: Rect | None
    editor: Rect | None
    spacer: Rect | None
    hint: Rect | None
    text_area: Rect | None


def input_height(textarea: Measurable, width: int) -> int:
    """Height of the editor block: clamped text rows plus the padding row."""
    usable_width = max(0, width - GUTTER_WIDTH)
    text_height = max(MIN_TEXT_ROWS, min(MAX_TEXT_ROWS, textarea.desired_height(usable_width)))
    return text_height + EDITOR_PADDING_ROWS


def desired_height(textarea: Measurable, width: int) -> int:
    return input_height(textarea, width) + CHROME_ROWS


def textarea_rect(textarea: Measurable, area: Rect) -> Rect | None:
    """Rectangle the text area is drawn into, or ``None`` if it cannot fit."""
    if area.width < MIN_TEXT_AREA_WIDTH:
        return None
    text_area_height = input_height(textarea, area.width) - EDITOR_PADDING_ROWS
    if text_area_height <= 0:
        return None
    return Rect(
        x=area.x + TEXT_AREA_OFFSET_X,
        y=area.y + TEXT_AREA_OFFSET_Y,
        width=area.width - TEXT_AREA_OFFSET_X,
        height=text_area_height,
    )


def plan_layout(textarea: Measurable, area: Rect) -> PaneLayout:
    """Partition *area* into the pane's bands."""

    def band(y: int, height: int = 1) -> Rect | None:
        rect = area.row(y, height)
        return None if rect.is_empty() else rect

    editor_height = input_height(textarea, area.width)
    editor_y = area.y + HEADER_ROWS
    spacer_y = editor_y + editor_height
    return PaneLayout(
        title=band(area.y),
        path=band(area.y + 1),
        status=band(area.y + 2),
        editor=band(editor_y, editor_height),
        spacer=band(spacer_y),
        hint=band(spacer_y + 1),
        text_area=textarea_rect(textarea, area),
    )
