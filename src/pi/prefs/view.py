"""Bottom pane view protocol."""

from __future__ import annotations

import enum
from typing import Protocol, runtime_checkable

from pi.prefs.geometry import Rect
from pi.prefs.keys import KeyEvent
from pi.prefs.surface import Surface


class CancellationEvent(enum.Enum):
    """Outcome of delivering a cancel signal (Ctrl+C / Esc) to a view."""

    HANDLED = "handled"
    NOT_HANDLED = "not_handled"


@runtime_checkable
class BottomPaneView(Protocol):
    """A modal view hosted in the bottom pane.

    ``handle_paste``, ``on_ctrl_c`` and ``cursor_pos`` are optional: the host
    checks for them with ``getattr`` and falls back to ignoring the paste,
    closing the view, and hiding the caret respectively.
    """

    def handle_key_event(self, key_event: KeyEvent) -> None:
        """Handle a decoded key press."""
        ...

    def is_complete(self) -> bool:
        """Return ``True`` once the host should remove the view."""
        ...

    def desired_height(self, width: int) -> int:
        """Rows the view wants when given *width* columns."""
        ...

    def render(self, area: Rect, surface: Surface) -> None:
        """Paint the view into *area* of *surface*."""
        ...
