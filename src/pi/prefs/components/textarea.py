"""Multi-line text area with word wrap and a scrollable viewport.

The text is held as one flat string and the cursor as a character offset into
it.  Layout is recomputed from the text and the available width; the only
state carried between frames is the scroll offset in ``TextAreaState``, which
the owner passes explicitly to :meth:`TextArea.render` and
:meth:`TextArea.cursor_pos_with_state`.
"""

from __future__ import annotations

from dataclasses import dataclass

from pi.prefs.geometry import Rect
from pi.prefs.keybindings import (
    TextAreaAction,
    TextAreaKeybindingsManager,
    get_textarea_keybindings,
)
from pi.prefs.keys import KeyEvent
from pi.prefs.surface import Surface
from pi.prefs.utils import (
    grapheme_width,
    graphemes,
    is_punctuation_char,
    is_whitespace_char,
    visible_width,
)

TAB_SPACES = "    "


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class TextChunk:
    """A piece of one logical line produced by word wrapping."""

    text: str
    start_index: int
    end_index: int


@dataclass
class TextAreaState:
    """Per-view render state: first visible wrapped row."""

    scroll: int = 0


@dataclass(frozen=True)
class _VisualLine:
    start: int
    end: int
    # Last wrapped row of its logical line; owns a cursor sitting at ``end``
    last: bool


# ---------------------------------------------------------------------------
# word_wrap_line
# ---------------------------------------------------------------------------


def word_wrap_line(line: str, max_width: int) -> list[TextChunk]:
    """Split a line into chunks no wider than *max_width*.

    Breaks after whitespace when possible and falls back to breaking between
    graphemes for words longer than the available width.  Trailing whitespace
    stays on the row it follows.
    """
    if not line or max_width <= 0:
        return [TextChunk(text=line, start_index=0, end_index=len(line))]

    if visible_width(line) <= max_width:
        return [TextChunk(text=line, start_index=0, end_index=len(line))]

    segments: list[tuple[str, int]] = []
    idx = 0
    for g in graphemes(line):
        segments.append((g, idx))
        idx += len(g)

    chunks: list[TextChunk] = []
    current_width = 0
    chunk_start = 0
    wrap_index = -1
    wrap_width = 0

    for i, (g, char_index) in enumerate(segments):
        g_width = grapheme_width(g)

        if current_width + g_width > max_width:
            if wrap_index > chunk_start:
                chunks.append(TextChunk(line[chunk_start:wrap_index], chunk_start, wrap_index))
                chunk_start = wrap_index
                current_width -= wrap_width
            wrap_index = -1
            # Still too wide after the word break: break before this grapheme
            if current_width + g_width > max_width and chunk_start < char_index:
                chunks.append(TextChunk(line[chunk_start:char_index], chunk_start, char_index))
                chunk_start = char_index
                current_width = 0

        current_width += g_width

        # Break opportunity: whitespace followed by non-whitespace
        if is_whitespace_char(g) and i + 1 < len(segments):
            next_g, next_idx = segments[i + 1]
            if not is_whitespace_char(next_g):
                wrap_index = next_idx
                wrap_width = current_width

    chunks.append(TextChunk(line[chunk_start:], chunk_start, len(line)))
    return chunks


# ---------------------------------------------------------------------------
# TextArea
# ---------------------------------------------------------------------------


class TextArea:
    """Editable multi-line text with cursor movement and word-wise editing."""

    def __init__(self, keybindings: TextAreaKeybindingsManager | None = None) -> None:
        self._text: str = ""
        self._cursor: int = 0
        # Sticky visual column for vertical movement
        self._preferred_col: int | None = None
        # Width used for vertical movement; updated on every render
        self._last_width: int = 80
        self._keybindings = keybindings
        self._wrap_cache: tuple[str, int, list[_VisualLine]] | None = None

    # -- Text access ---------------------------------------------------------

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        """Replace the content verbatim, keeping the cursor in range."""
        self._text = text
        self._cursor = min(self._cursor, len(text))
        self._preferred_col = None

    @property
    def cursor(self) -> int:
        return self._cursor

    def set_cursor(self, offset: int) -> None:
        self._cursor = max(0, min(offset, len(self._text)))
        self._preferred_col = None

    def is_empty(self) -> bool:
        return not self._text

    def insert_str(self, text: str) -> None:
        """Insert pasted text at the cursor.

        Line endings are normalised to ``\\n``, tabs become four spaces and
        other control characters are dropped.
        """
        clean = text.replace("\r\n", "\n").replace("\r", "\n").replace("\t", TAB_SPACES)
        filtered = "".join(ch for ch in clean if ch == "\n" or ord(ch) >= 32)
        if filtered:
            self._replace_range(self._cursor, self._cursor, filtered)

    # -- Input ---------------------------------------------------------------

    def input(self, event: KeyEvent) -> None:
        """Apply a key press: a bound editing action or typed text."""
        kb = self._keybindings or get_textarea_keybindings()
        action = kb.action_for(event)
        if action is not None:
            self._apply(action)
            return

        text = event.text()
        if text is not None:
            self._replace_range(self._cursor, self._cursor, text)

    def _apply(self, action: TextAreaAction) -> None:  # noqa: C901
        cursor = self._cursor
        if action == "cursorUp":
            self._move_vertical(-1)
        elif action == "cursorDown":
            self._move_vertical(1)
        elif action == "cursorLeft":
            self.set_cursor(self._prev_boundary(cursor))
        elif action == "cursorRight":
            self.set_cursor(self._next_boundary(cursor))
        elif action == "cursorWordLeft":
            self.set_cursor(self._word_start_before(cursor))
        elif action == "cursorWordRight":
            self.set_cursor(self._word_end_after(cursor))
        elif action == "cursorLineStart":
            self.set_cursor(self._line_start(cursor))
        elif action == "cursorLineEnd":
            self.set_cursor(self._line_end(cursor))
        elif action == "deleteCharBackward":
            self._replace_range(self._prev_boundary(cursor), cursor, "")
        elif action == "deleteCharForward":
            self._replace_range(cursor, self._next_boundary(cursor), "")
        elif action == "deleteWordBackward":
            self._replace_range(self._word_start_before(cursor), cursor, "")
        elif action == "deleteWordForward":
            self._replace_range(cursor, self._word_end_after(cursor), "")
        elif action == "deleteToLineStart":
            start = self._line_start(cursor)
            # At column 0: join with the previous line
            self._replace_range(start if start < cursor else max(0, cursor - 1), cursor, "")
        elif action == "deleteToLineEnd":
            end = self._line_end(cursor)
            # At end of line: join with the next line
            self._replace_range(cursor, end if end > cursor else min(len(self._text), cursor + 1), "")
        elif action == "newLine":
            self._replace_range(cursor, cursor, "\n")
        elif action == "tab":
            self._replace_range(cursor, cursor, TAB_SPACES)

    def _replace_range(self, start: int, end: int, text: str) -> None:
        if start == end and not text:
            return
        self._text = self._text[:start] + text + self._text[end:]
        self._cursor = start + len(text)
        self._preferred_col = None

    # -- Offsets -------------------------------------------------------------

    def _line_start(self, pos: int) -> int:
        return self._text.rfind("\n", 0, pos) + 1

    def _line_end(self, pos: int) -> int:
        end = self._text.find("\n", pos)
        return len(self._text) if end == -1 else end

    def _prev_boundary(self, pos: int) -> int:
        if pos <= 0:
            return 0
        start = self._line_start(pos)
        if start == pos:
            return pos - 1
        return pos - len(graphemes(self._text[start:pos])[-1])

    def _next_boundary(self, pos: int) -> int:
        if pos >= len(self._text):
            return len(self._text)
        end = self._line_end(pos)
        if end == pos:
            return pos + 1
        return pos + len(graphemes(self._text[pos:end])[0])

    def _word_start_before(self, pos: int) -> int:
        text = self._text
        i = pos
        while i > 0 and is_whitespace_char(text[i - 1]):
            i -= 1
        if i > 0 and is_punctuation_char(text[i - 1]):
            while i > 0 and is_punctuation_char(text[i - 1]):
                i -= 1
        else:
            while i > 0 and not is_whitespace_char(text[i - 1]) and not is_punctuation_char(text[i - 1]):
                i -= 1
        return i

    def _word_end_after(self, pos: int) -> int:
        text = self._text
        i = pos
        while i < len(text) and is_whitespace_char(text[i]):
            i += 1
        if i < len(text) and is_punctuation_char(text[i]):
            while i < len(text) and is_punctuation_char(text[i]):
                i += 1
        else:
            while i < len(text) and not is_whitespace_char(text[i]) and not is_punctuation_char(text[i]):
                i += 1
        return i

    # -- Layout --------------------------------------------------------------

    def _visual_lines(self, width: int) -> list[_VisualLine]:
        width = max(1, width)
        cache = self._wrap_cache
        if cache is not None and cache[0] is self._text and cache[1] == width:
            return cache[2]

        lines: list[_VisualLine] = []
        offset = 0
        for logical in self._text.split("\n"):
            chunks = word_wrap_line(logical, width)
            for i, chunk in enumerate(chunks):
                lines.append(
                    _VisualLine(
                        start=offset + chunk.start_index,
                        end=offset + chunk.end_index,
                        last=i == len(chunks) - 1,
                    )
                )
            offset += len(logical) + 1

        self._wrap_cache = (self._text, width, lines)
        return lines

    def _cursor_location(self, width: int) -> tuple[int, int]:
        """Return the (wrapped row, visual column) of the cursor."""
        lines = self._visual_lines(width)
        for row, line in enumerate(lines):
            inside = line.start <= self._cursor <= line.end if line.last else line.start <= self._cursor < line.end
            if inside:
                return row, visible_width(self._text[line.start : self._cursor])
        return len(lines) - 1, 0

    def _offset_at_column(self, line: _VisualLine, col: int) -> int:
        offset = line.start
        used = 0
        last_len = 0
        for g in graphemes(self._text[line.start : line.end]):
            w = grapheme_width(g)
            if used + w > col:
                break
            used += w
            offset += len(g)
            last_len = len(g)
        if not line.last and offset >= line.end and last_len:
            # The end of a wrapped row belongs to the row below
            offset -= last_len
        return offset

    def _move_vertical(self, delta: int) -> None:
        lines = self._visual_lines(self._last_width)
        row, col = self._cursor_location(self._last_width)
        target = row + delta
        if target < 0:
            self.set_cursor(0)
            return
        if target >= len(lines):
            self.set_cursor(len(self._text))
            return
        preferred = col if self._preferred_col is None else self._preferred_col
        self._cursor = self._offset_at_column(lines[target], preferred)
        self._preferred_col = preferred

    def desired_height(self, width: int) -> int:
        """Number of rows the text occupies when wrapped to *width*."""
        return len(self._visual_lines(width))

    @staticmethod
    def _clamp_scroll(scroll: int, cursor_row: int, height: int, total: int) -> int:
        if cursor_row < scroll:
            scroll = cursor_row
        elif cursor_row >= scroll + height:
            scroll = cursor_row - height + 1
        return max(0, min(scroll, max(0, total - height)))

    # -- Rendering -----------------------------------------------------------

    def render(self, area: Rect, surface: Surface, state: TextAreaState) -> None:
        """Paint the visible rows into *area*, scrolling to keep the cursor in view."""
        if area.is_empty():
            return
        self._last_width = area.width
        lines = self._visual_lines(area.width)
        row, _col = self._cursor_location(area.width)
        state.scroll = self._clamp_scroll(state.scroll, row, area.height, len(lines))

        surface.clear(area)
        for i, line in enumerate(lines[state.scroll : state.scroll + area.height]):
            surface.set_string(area.x, area.y + i, self._text[line.start : line.end], max_width=area.width)

    def cursor_pos_with_state(self, area: Rect, state: TextAreaState) -> tuple[int, int] | None:
        """Return the screen (column, row) of the cursor without touching *state*."""
        if area.is_empty():
            return None
        lines = self._visual_lines(area.width)
        row, col = self._cursor_location(area.width)
        scroll = self._clamp_scroll(state.scroll, row, area.height, len(lines))
        return area.x + min(col, area.width - 1), area.y + row - scroll
