"""Tests for TextArea editing, wrapping, scrolling and cursor placement."""

from __future__ import annotations

import pytest

from pi.prefs.components.textarea import TextArea, TextAreaState, word_wrap_line
from pi.prefs.geometry import Rect
from pi.prefs.keybindings import TextAreaKeybindingsManager
from pi.prefs.keys import KeyEvent, KeyModifiers, parse_key_event
from pi.prefs.surface import Surface
from pi.prefs.utils import visible_width

# Raw escape codes for key sequences
KEY_UP = "\x1b[A"
KEY_DOWN = "\x1b[B"
KEY_RIGHT = "\x1b[C"
KEY_LEFT = "\x1b[D"
KEY_HOME = "\x1b[H"
KEY_END = "\x1b[F"
KEY_DELETE = "\x1b[3~"
KEY_BACKSPACE = "\x7f"
KEY_ENTER = "\r"
KEY_TAB = "\t"
KEY_CTRL_A = "\x01"
KEY_CTRL_E = "\x05"
KEY_CTRL_G = "\x07"
KEY_CTRL_K = "\x0b"
KEY_CTRL_U = "\x15"
KEY_CTRL_W = "\x17"
KEY_ALT_B = "\x1bb"
KEY_ALT_F = "\x1bf"
KEY_ALT_D = "\x1bd"
KEY_ALT_X = "\x1bx"


def make_textarea(text: str = "", cursor: int | None = None) -> TextArea:
    ta = TextArea()
    ta.set_text(text)
    ta.set_cursor(len(text) if cursor is None else cursor)
    return ta


def press(ta: TextArea, *keys: str) -> None:
    for data in keys:
        event = parse_key_event(data)
        assert event is not None, f"undecodable key {data!r}"
        ta.input(event)


class TestTextAccess:
    def test_set_text_is_verbatim(self) -> None:
        ta = make_textarea("a\r\nb\tc")
        assert ta.get_text() == "a\r\nb\tc"

    def test_set_text_clamps_cursor(self) -> None:
        ta = make_textarea("hello world")
        ta.set_text("hi")
        assert ta.cursor == 2

    def test_set_cursor_clamps(self) -> None:
        ta = make_textarea("abc")
        ta.set_cursor(-5)
        assert ta.cursor == 0
        ta.set_cursor(99)
        assert ta.cursor == 3

    def test_is_empty(self) -> None:
        assert make_textarea("").is_empty() is True
        assert make_textarea(" ").is_empty() is False


class TestTyping:
    """Printable keys insert text at the cursor."""

    def test_insert_at_cursor(self) -> None:
        ta = make_textarea("ac", cursor=1)
        press(ta, "b")
        assert ta.get_text() == "abc"
        assert ta.cursor == 2

    def test_enter_inserts_newline(self) -> None:
        ta = make_textarea("ab", cursor=1)
        press(ta, KEY_ENTER)
        assert ta.get_text() == "a\nb"

    def test_tab_inserts_spaces(self) -> None:
        ta = make_textarea("")
        press(ta, KEY_TAB)
        assert ta.get_text() == "    "

    def test_unicode_insert(self) -> None:
        ta = make_textarea("")
        press(ta, "é", "日")
        assert ta.get_text() == "é日"

    def test_unbound_control_key_ignored(self) -> None:
        ta = make_textarea("abc")
        press(ta, KEY_CTRL_G)
        assert ta.get_text() == "abc"
        assert ta.cursor == 3

    def test_alt_letter_not_inserted(self) -> None:
        ta = make_textarea("abc")
        press(ta, KEY_ALT_X)
        assert ta.get_text() == "abc"

    def test_super_letter_not_inserted(self) -> None:
        ta = make_textarea("abc")
        ta.input(KeyEvent("v", KeyModifiers.SUPER))
        assert ta.get_text() == "abc"


class TestDeletion:
    def test_backspace(self) -> None:
        ta = make_textarea("abc")
        press(ta, KEY_BACKSPACE)
        assert ta.get_text() == "ab"

    def test_backspace_at_start_is_noop(self) -> None:
        ta = make_textarea("abc", cursor=0)
        press(ta, KEY_BACKSPACE)
        assert ta.get_text() == "abc"

    def test_backspace_joins_lines(self) -> None:
        ta = make_textarea("ab\ncd", cursor=3)
        press(ta, KEY_BACKSPACE)
        assert ta.get_text() == "abcd"
        assert ta.cursor == 2

    def test_backspace_removes_whole_grapheme(self) -> None:
        ta = make_textarea("aé")
        press(ta, KEY_BACKSPACE)
        assert ta.get_text() == "a"

    def test_delete_forward(self) -> None:
        ta = make_textarea("abc", cursor=1)
        press(ta, KEY_DELETE)
        assert ta.get_text() == "ac"
        assert ta.cursor == 1

    def test_delete_word_backward(self) -> None:
        ta = make_textarea("hello world")
        press(ta, KEY_CTRL_W)
        assert ta.get_text() == "hello "

    def test_delete_word_backward_skips_trailing_space(self) -> None:
        ta = make_textarea("hello world  ")
        press(ta, KEY_CTRL_W)
        assert ta.get_text() == "hello "

    def test_delete_word_forward(self) -> None:
        ta = make_textarea("hello world", cursor=0)
        press(ta, KEY_ALT_D)
        assert ta.get_text() == " world"

    def test_delete_to_line_start(self) -> None:
        ta = make_textarea("one\ntwo three")
        press(ta, KEY_CTRL_U)
        assert ta.get_text() == "one\n"

    def test_delete_to_line_start_at_column_zero_joins(self) -> None:
        ta = make_textarea("one\ntwo", cursor=4)
        press(ta, KEY_CTRL_U)
        assert ta.get_text() == "onetwo"

    def test_delete_to_line_end(self) -> None:
        ta = make_textarea("one two\nthree", cursor=3)
        press(ta, KEY_CTRL_K)
        assert ta.get_text() == "one\nthree"

    def test_delete_to_line_end_at_eol_joins(self) -> None:
        ta = make_textarea("ab\ncd", cursor=2)
        press(ta, KEY_CTRL_K)
        assert ta.get_text() == "abcd"


class TestCursorMovement:
    def test_left_right(self) -> None:
        ta = make_textarea("abc")
        press(ta, KEY_LEFT, KEY_LEFT)
        assert ta.cursor == 1
        press(ta, KEY_RIGHT)
        assert ta.cursor == 2

    def test_left_crosses_line_break(self) -> None:
        ta = make_textarea("ab\ncd", cursor=3)
        press(ta, KEY_LEFT)
        assert ta.cursor == 2

    def test_line_start_and_end(self) -> None:
        ta = make_textarea("one\ntwo\nthree", cursor=5)
        press(ta, KEY_CTRL_A)
        assert ta.cursor == 4
        press(ta, KEY_CTRL_E)
        assert ta.cursor == 7
        press(ta, KEY_HOME)
        assert ta.cursor == 4
        press(ta, KEY_END)
        assert ta.cursor == 7

    def test_word_motion(self) -> None:
        ta = make_textarea("foo bar")
        press(ta, KEY_ALT_B)
        assert ta.cursor == 4
        ta.set_cursor(0)
        press(ta, KEY_ALT_F)
        assert ta.cursor == 3

    def test_word_motion_stops_at_punctuation(self) -> None:
        ta = make_textarea("foo.bar")
        press(ta, KEY_ALT_B)
        assert ta.cursor == 4

    def test_vertical_keeps_preferred_column(self) -> None:
        ta = make_textarea("abcdef\nxy\nabcdef")
        press(ta, KEY_UP)
        assert ta.cursor == 9
        press(ta, KEY_UP)
        assert ta.cursor == 6

    def test_up_from_first_row_goes_to_start(self) -> None:
        ta = make_textarea("abc\ndef", cursor=2)
        press(ta, KEY_UP)
        assert ta.cursor == 0

    def test_down_from_last_row_goes_to_end(self) -> None:
        ta = make_textarea("abc\ndef", cursor=5)
        press(ta, KEY_DOWN)
        assert ta.cursor == 7

    def test_down_moves_between_wrapped_rows(self) -> None:
        ta = make_textarea("aaaa bbbb cccc", cursor=0)
        area = Rect(0, 0, 5, 3)
        ta.render(area, Surface(area), TextAreaState())
        press(ta, KEY_DOWN)
        assert ta.cursor == 5


class TestPaste:
    def test_line_endings_normalised(self) -> None:
        ta = make_textarea("")
        ta.insert_str("a\r\nb\rc")
        assert ta.get_text() == "a\nb\nc"

    def test_tabs_expanded_and_controls_dropped(self) -> None:
        ta = make_textarea("")
        ta.insert_str("x\ty\x01z")
        assert ta.get_text() == "x    yz"

    def test_inserted_at_cursor(self) -> None:
        ta = make_textarea("ad", cursor=1)
        ta.insert_str("bc")
        assert ta.get_text() == "abcd"
        assert ta.cursor == 3


class TestWordWrap:
    def test_short_line_single_chunk(self) -> None:
        chunks = word_wrap_line("hello", 10)
        assert [c.text for c in chunks] == ["hello"]

    def test_breaks_after_whitespace(self) -> None:
        chunks = word_wrap_line("hello world", 6)
        assert [c.text for c in chunks] == ["hello ", "world"]
        assert (chunks[1].start_index, chunks[1].end_index) == (6, 11)

    def test_long_word_broken_by_grapheme(self) -> None:
        chunks = word_wrap_line("abcdefgh", 3)
        assert [c.text for c in chunks] == ["abc", "def", "gh"]

    def test_wide_characters(self) -> None:
        chunks = word_wrap_line("日本語", 4)
        assert [c.text for c in chunks] == ["日本", "語"]

    def test_wide_character_after_word_break(self) -> None:
        # Breaking after the space still leaves "中👍" (4 cells) too wide
        chunks = word_wrap_line(" 中👍", 3)
        assert [c.text for c in chunks] == [" ", "中", "👍"]
        assert all(visible_width(c.text) <= 3 for c in chunks)

    @pytest.mark.parametrize(
        ("line", "width"),
        [
            (" 中👍", 3),
            ("a 日本語 b", 3),
            ("ab 日本 cd 語", 4),
            ("x 👍👍👍 y", 2),
            ("hello 世界 wide 文字 text", 5),
        ],
    )
    def test_chunks_never_exceed_width(self, line: str, width: int) -> None:
        chunks = word_wrap_line(line, width)
        assert "".join(c.text for c in chunks) == line
        assert all(visible_width(c.text) <= width for c in chunks)

    def test_wrapped_wide_text_is_fully_rendered(self) -> None:
        ta = make_textarea(" 中👍", cursor=0)
        area = Rect(0, 0, 3, 3)
        surface = Surface(area)
        ta.render(area, surface, TextAreaState())
        assert ta.desired_height(3) == 3
        assert "👍" in "".join(surface.plain_lines())


class TestDesiredHeight:
    def test_empty_text_is_one_row(self) -> None:
        assert make_textarea("").desired_height(10) == 1

    def test_logical_lines(self) -> None:
        assert make_textarea("a\nb\nc").desired_height(10) == 3

    def test_trailing_newline_adds_row(self) -> None:
        assert make_textarea("a\n").desired_height(10) == 2

    def test_wrapped_lines(self) -> None:
        assert make_textarea("aaaa bbbb cccc").desired_height(5) == 3

    def test_zero_width_does_not_fail(self) -> None:
        assert make_textarea("abc").desired_height(0) == 3


class TestRender:
    def test_paints_rows(self) -> None:
        ta = make_textarea("one\ntwo", cursor=0)
        area = Rect(0, 0, 6, 3)
        surface = Surface(area)
        ta.render(area, surface, TextAreaState())
        assert surface.plain_lines() == ["one   ", "two   ", "      "]

    def test_clears_previous_content(self) -> None:
        area = Rect(0, 0, 4, 1)
        surface = Surface(area)
        surface.set_string(0, 0, "XXXX")
        make_textarea("a").render(area, surface, TextAreaState())
        assert surface.plain_lines() == ["a   "]

    def test_scrolls_to_cursor(self) -> None:
        ta = make_textarea("line1\nline2\nline3")
        area = Rect(0, 0, 10, 2)
        surface = Surface(area)
        state = TextAreaState()
        ta.render(area, surface, state)
        assert state.scroll == 1
        assert [line.rstrip() for line in surface.plain_lines()] == ["line2", "line3"]

    def test_scroll_moves_back_up(self) -> None:
        ta = make_textarea("line1\nline2\nline3", cursor=0)
        area = Rect(0, 0, 10, 2)
        state = TextAreaState(scroll=1)
        ta.render(area, Surface(area), state)
        assert state.scroll == 0

    def test_scroll_clamped_when_text_shrinks(self) -> None:
        ta = make_textarea("a", cursor=0)
        area = Rect(0, 0, 10, 4)
        state = TextAreaState(scroll=5)
        ta.render(area, Surface(area), state)
        assert state.scroll == 0

    def test_render_into_offset_area(self) -> None:
        ta = make_textarea("hi")
        surface = Surface(Rect(0, 0, 6, 3))
        ta.render(Rect(2, 1, 4, 2), surface, TextAreaState())
        assert surface.plain_lines()[1] == "  hi  "


class TestCursorPos:
    def test_end_of_text(self) -> None:
        ta = make_textarea("hello")
        assert ta.cursor_pos_with_state(Rect(3, 2, 20, 4), TextAreaState()) == (8, 2)

    def test_does_not_mutate_state(self) -> None:
        ta = make_textarea("line1\nline2\nline3")
        state = TextAreaState()
        assert ta.cursor_pos_with_state(Rect(0, 0, 10, 2), state) == (5, 1)
        assert state.scroll == 0

    def test_matches_render(self) -> None:
        ta = make_textarea("\n".join(f"row {i}" for i in range(10)))
        area = Rect(0, 0, 12, 3)
        state = TextAreaState()
        surface = Surface(area)
        ta.render(area, surface, state)
        col, row = ta.cursor_pos_with_state(area, state)
        assert surface.plain_lines()[row].rstrip() == "row 9"
        assert col == len("row 9")

    def test_wide_characters(self) -> None:
        ta = make_textarea("日本")
        assert ta.cursor_pos_with_state(Rect(0, 0, 10, 1), TextAreaState()) == (4, 0)

    def test_clamped_to_area_width(self) -> None:
        ta = make_textarea("abcd")
        assert ta.cursor_pos_with_state(Rect(0, 0, 4, 1), TextAreaState()) == (3, 0)

    def test_empty_area(self) -> None:
        assert make_textarea("a").cursor_pos_with_state(Rect(0, 0, 0, 0), TextAreaState()) is None


class TestCustomKeybindings:
    def test_override_rebinds_action(self) -> None:
        ta = TextArea(keybindings=TextAreaKeybindingsManager({"cursorLineStart": "ctrl+g"}))
        ta.set_text("abc")
        ta.set_cursor(3)
        press(ta, KEY_CTRL_G)
        assert ta.cursor == 0
        # ctrl+a is no longer bound
        press(ta, KEY_CTRL_E, KEY_CTRL_A)
        assert ta.cursor == 3
