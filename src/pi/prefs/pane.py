"""Bottom pane host: a stack of modal views driven by raw terminal input.

``BottomPane`` follows the ``pi.tui`` component contract (``render(width)``
returning terminal lines, ``handle_input(data)`` receiving raw input,
``invalidate()``), so it can be added to a ``TUI`` container directly.  It
decodes input into key events for the active view, delivers bracketed pastes
as a whole, and removes views once they report completion.
"""

from __future__ import annotations

import logging

from pi.prefs.geometry import Rect
from pi.prefs.keys import (
    KeyEvent,
    KeyModifiers,
    is_key_release,
    parse_key_event,
    split_key_sequences,
)
from pi.prefs.surface import Surface
from pi.prefs.view import BottomPaneView, CancellationEvent

logger = logging.getLogger(__name__)

CURSOR_MARKER = "\x1b_pi:c\x07"

_PASTE_START = "\x1b[200~"
_PASTE_END = "\x1b[201~"

_CANCEL_KEYS = (
    KeyEvent("c", KeyModifiers.CONTROL),
    KeyEvent("escape"),
)


def _is_cancel(event: KeyEvent) -> bool:
    return any(
        event.code.lower() == key.code and event.modifiers == key.modifiers
        for key in _CANCEL_KEYS
    )


class BottomPane:
    """Hosts a stack of ``BottomPaneView`` instances; the top one is active."""

    def __init__(self, max_height: int | None = None) -> None:
        self._view_stack: list[BottomPaneView] = []
        self._max_height = max_height
        self.focused: bool = False

        # Bracketed paste mode buffering
        self._paste_buffer: str = ""
        self._is_in_paste: bool = False

    # -- View stack ----------------------------------------------------------

    def push_view(self, view: BottomPaneView) -> None:
        self._view_stack.append(view)

    def active_view(self) -> BottomPaneView | None:
        return self._view_stack[-1] if self._view_stack else None

    def has_active_view(self) -> bool:
        return bool(self._view_stack)

    def _pop_active_view(self) -> None:
        view = self._view_stack.pop()
        logger.debug("Closed bottom pane view %s", type(view).__name__)

    def _pop_if_complete(self) -> None:
        view = self.active_view()
        if view is not None and view.is_complete():
            self._pop_active_view()

    # -- Input ---------------------------------------------------------------

    def handle_input(self, data: str) -> None:
        """Route raw terminal input to the active view."""
        if self._is_in_paste:
            self._paste_buffer += data
            self._finish_paste()
            return

        start_index = data.find(_PASTE_START)
        if start_index != -1:
            # Keys typed before the paste began
            self._dispatch_keys(data[:start_index])
            self._is_in_paste = True
            self._paste_buffer = data[start_index + len(_PASTE_START) :]
            self._finish_paste()
            return

        self._dispatch_keys(data)

    def _finish_paste(self) -> None:
        end_index = self._paste_buffer.find(_PASTE_END)
        if end_index == -1:
            return
        pasted = self._paste_buffer[:end_index]
        remaining = self._paste_buffer[end_index + len(_PASTE_END) :]
        self._is_in_paste = False
        self._paste_buffer = ""
        if pasted:
            self.handle_paste(pasted)
        if remaining:
            self.handle_input(remaining)

    def _dispatch_keys(self, data: str) -> None:
        if not data or is_key_release(data):
            return

        event = parse_key_event(data)
        if event is not None:
            self.handle_key_event(event)
            return

        # Several keys arriving in one read
        for sequence in split_key_sequences(data):
            if is_key_release(sequence):
                continue
            event = parse_key_event(sequence)
            if event is not None:
                self.handle_key_event(event)

    def handle_key_event(self, event: KeyEvent) -> None:
        view = self.active_view()
        if view is None:
            return

        if _is_cancel(event):
            self.on_ctrl_c()
            return

        view.handle_key_event(event)
        self._pop_if_complete()

    def handle_paste(self, pasted: str) -> bool:
        """Deliver *pasted* to the active view; returns whether it changed anything."""
        view = self.active_view()
        if view is None:
            return False
        handler = getattr(view, "handle_paste", None)
        changed = bool(handler(pasted)) if callable(handler) else False
        self._pop_if_complete()
        return changed

    def on_ctrl_c(self) -> CancellationEvent:
        """Deliver a cancel signal; views that do not handle it are closed."""
        view = self.active_view()
        if view is None:
            return CancellationEvent.NOT_HANDLED

        handler = getattr(view, "on_ctrl_c", None)
        result = handler() if callable(handler) else CancellationEvent.NOT_HANDLED
        if result is CancellationEvent.NOT_HANDLED or view.is_complete():
            self._pop_active_view()
        return CancellationEvent.HANDLED

    # -- Rendering -----------------------------------------------------------

    def desired_height(self, width: int) -> int:
        view = self.active_view()
        if view is None:
            return 0
        height = view.desired_height(width)
        if self._max_height is not None:
            height = min(height, self._max_height)
        return height

    def cursor_pos(self, area: Rect) -> tuple[int, int] | None:
        view = self.active_view()
        if view is None:
            return None
        query = getattr(view, "cursor_pos", None)
        return query(area) if callable(query) else None

    def render(self, width: int) -> list[str]:
        """Render the active view into ``desired_height(width)`` lines."""
        view = self.active_view()
        height = self.desired_height(width)
        if view is None or width <= 0 or height <= 0:
            return []

        area = Rect(0, 0, width, height)
        surface = Surface(area)
        view.render(area, surface)
        cursor = self.cursor_pos(area) if self.focused else None
        return surface.to_lines(cursor=cursor, marker=CURSOR_MARKER)

    def invalidate(self) -> None:
        """No cached state to invalidate currently."""
