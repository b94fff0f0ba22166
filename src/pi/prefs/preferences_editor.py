"""Bottom pane view for editing a single text file in place.

The view tracks whether the buffer differs from what was last written,
saves on Ctrl+S, and requires a second close request before throwing away
unsaved edits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from pi.prefs import layout
from pi.prefs.components.textarea import TextArea, TextAreaState
from pi.prefs.errors import SaveError
from pi.prefs.fs import FileSystem, LocalFileSystem
from pi.prefs.geometry import Rect
from pi.prefs.keys import KeyEvent
from pi.prefs.status import StatusMessage
from pi.prefs.surface import Span, Surface
from pi.prefs.theme import PaneTheme
from pi.prefs.view import CancellationEvent

logger = logging.getLogger(__name__)

SAVE_FAILED_PREFIX = "Failed to save preferences"
DISCARD_WARNING = "Unsaved changes. Press Esc again to discard, or Ctrl+S to save."
UNSAVED_HINT = "Unsaved changes · press Ctrl+S to save"
ALL_SAVED = "All changes saved"


@dataclass
class PreferencesEditorOptions:
    title: str = "Edit preferences.md"
    placeholder: str = "Type your preferences and press Ctrl+S to save"
    hint: str = "Ctrl+S save · Esc close"


class PreferencesEditorView:
    """Edits the contents of *path*, starting from *contents*.

    A close request on a clean buffer completes the view.  On a dirty buffer
    the first request arms a discard confirmation and the second completes;
    any edit or a successful save disarms it.  Once complete, the view
    ignores further input and waits to be removed by its host.
    """

    def __init__(
        self,
        path: Path | str,
        contents: str,
        *,
        fs: FileSystem | None = None,
        theme: PaneTheme | None = None,
        options: PreferencesEditorOptions | None = None,
    ) -> None:
        self._path = Path(path)
        self._display_path = str(self._path)
        self._fs: FileSystem = fs or LocalFileSystem()
        self._theme = theme or PaneTheme()
        self._options = options or PreferencesEditorOptions()

        self._textarea = TextArea()
        self._textarea.set_text(contents)
        self._textarea.set_cursor(len(contents))
        self._textarea_state = TextAreaState()

        self._last_saved_text = contents
        self._dirty = False
        self._complete = False
        self._status_message: StatusMessage | None = None
        self._confirm_discard = False

    # -- Accessors -----------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def display_path(self) -> str:
        return self._display_path

    @property
    def textarea(self) -> TextArea:
        return self._textarea

    @property
    def last_saved_text(self) -> str:
        return self._last_saved_text

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def confirm_discard(self) -> bool:
        return self._confirm_discard

    @property
    def status_message(self) -> StatusMessage | None:
        return self._status_message

    # -- Editing -------------------------------------------------------------

    def _apply_editor_change(self, edit: Callable[[TextArea], None]) -> bool:
        before = self._textarea.get_text()
        edit(self._textarea)
        changed = self._textarea.get_text() != before
        if changed:
            self._dirty = self._textarea.get_text() != self._last_saved_text
            self._status_message = None
            self._confirm_discard = False
        return changed

    def save(self) -> None:
        """Write the buffer to disk, creating the parent directory if needed."""
        if self._complete:
            return
        text = self._textarea.get_text()
        try:
            self._fs.create_dir_all(self._path.parent)
            self._fs.write(self._path, text.encode("utf-8"))
        except SaveError as e:
            logger.warning("Failed to save %s: %s", self._display_path, e)
            self._status_message = StatusMessage.error(f"{SAVE_FAILED_PREFIX}: {e}")
            return

        logger.info("Saved %s", self._display_path)
        self._last_saved_text = text
        self._dirty = False
        self._status_message = StatusMessage.info(f"Saved to {self._display_path}")
        self._confirm_discard = False

    def request_close(self) -> None:
        """Close when clean; when dirty, ask for a second request first."""
        if self._complete:
            return
        if self._dirty and not self._confirm_discard:
            self._confirm_discard = True
            self._status_message = StatusMessage.warning(DISCARD_WARNING)
            return
        if self._dirty:
            logger.info("Discarding unsaved changes to %s", self._display_path)
        self._confirm_discard = False
        self._complete = True

    def status_span(self) -> Span:
        if self._status_message is not None:
            return self._status_message.as_span(self._theme)
        if self._dirty:
            return Span(UNSAVED_HINT, self._theme.warning)
        return Span(ALL_SAVED, self._theme.info)

    # -- BottomPaneView ------------------------------------------------------

    def handle_key_event(self, key_event: KeyEvent) -> None:
        if self._complete:
            return
        if key_event.has_accelerator():
            if key_event.code in ("s", "S"):
                self.save()
                return
            if key_event.code in ("c", "C"):
                self.request_close()
                return

        self._apply_editor_change(lambda ta: ta.input(key_event))

    def handle_paste(self, pasted: str) -> bool:
        if self._complete:
            return False
        return self._apply_editor_change(lambda ta: ta.insert_str(pasted))

    def on_ctrl_c(self) -> CancellationEvent:
        self.request_close()
        return CancellationEvent.HANDLED

    def is_complete(self) -> bool:
        return self._complete

    def desired_height(self, width: int) -> int:
        return layout.desired_height(self._textarea, width)

    def render(self, area: Rect, surface: Surface) -> None:
        if area.is_empty():
            return

        theme = self._theme
        gutter = Span(layout.GUTTER, theme.gutter)
        plan = layout.plan_layout(self._textarea, area)

        if plan.title is not None:
            surface.render_line(plan.title, [gutter, Span(self._options.title, theme.title)])
        if plan.path is not None:
            surface.render_line(plan.path, [gutter, Span(f"Path: {self._display_path}", theme.path)])
        if plan.status is not None:
            surface.render_line(plan.status, [gutter, self.status_span()])

        editor = plan.editor
        if editor is not None and editor.width >= layout.GUTTER_WIDTH:
            for y in range(editor.y, editor.bottom):
                surface.render_line(Rect(editor.x, y, layout.GUTTER_WIDTH, 1), [gutter])
            if editor.width > layout.GUTTER_WIDTH:
                surface.clear(Rect(editor.x + layout.GUTTER_WIDTH, editor.y, editor.width - layout.GUTTER_WIDTH, 1))
            if plan.text_area is not None:
                self._textarea.render(plan.text_area, surface, self._textarea_state)
                if self._textarea.is_empty():
                    surface.render_line(plan.text_area, [Span(self._options.placeholder, theme.placeholder)])

        if plan.spacer is not None:
            surface.clear(plan.spacer)
        if plan.hint is not None:
            surface.render_line(plan.hint, [gutter, Span(self._options.hint, theme.hint)])

    def cursor_pos(self, area: Rect) -> tuple[int, int] | None:
        rect = layout.textarea_rect(self._textarea, area)
        if rect is None:
            return None
        pos = self._textarea.cursor_pos_with_state(rect, self._textarea_state)
        if pos is None or not area.contains(*pos):
            return None
        return pos
