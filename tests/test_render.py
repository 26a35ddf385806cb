"""Tests for line rendering -- draw_line, highlight_match and describe_buffer.

Uses the VirtualTerminal to capture the bytes written for each redraw.
"""

from __future__ import annotations

from pi.repl.line_buffer import LineBuffer
from pi.repl.render import describe_buffer, draw_line, highlight_match

from .virtual_terminal import VirtualTerminal

LEFT = "\x1b[1D"


def make(text: str, cursor: int | None = None) -> LineBuffer:
    buf = LineBuffer()
    buf.insert_sequence(text)
    if cursor is not None:
        buf.begin()
        for _ in range(cursor):
            buf.forward()
    return buf


class TestDrawLine:
    def test_cursor_at_end_needs_no_motion(self) -> None:
        term = VirtualTerminal()
        draw_line(term, "> ", make("abc"))
        assert term.output == "\r> abc"

    def test_cursor_in_middle_moves_left(self) -> None:
        term = VirtualTerminal()
        draw_line(term, "> ", make("abcd", cursor=1))
        assert term.output == "\r> abcd" + LEFT * 3

    def test_extra_blanks_stale_columns(self) -> None:
        term = VirtualTerminal()
        draw_line(term, "> ", make("ab"), extra=3)
        assert term.output == "\r> ab   " + LEFT * 3

    def test_negative_extra_is_ignored(self) -> None:
        term = VirtualTerminal()
        draw_line(term, "> ", make("ab"), extra=-2)
        assert term.output == "\r> ab"

    def test_cursor_override(self) -> None:
        term = VirtualTerminal()
        buf = make("(a)")
        draw_line(term, "", buf, cursor=0)
        assert term.output == "\r(a)" + LEFT * 3
        assert buf.cursor == 3

    def test_single_write_per_redraw(self) -> None:
        term = VirtualTerminal()
        draw_line(term, ">>> ", make("x = 1", cursor=2), extra=1)
        assert len(term.writes) == 1

    def test_empty_prompt_and_buffer(self) -> None:
        term = VirtualTerminal()
        draw_line(term, "", LineBuffer())
        assert term.output == "\r"


class TestHighlightMatch:
    def test_flashes_matching_open(self) -> None:
        term = VirtualTerminal()
        buf = make("(a)")
        assert highlight_match(term, "> ", buf, delay=0) is True
        assert term.writes == [
            ("\r> (a)" + LEFT * 3).encode(),
            b"\r> (a)",
        ]
        assert buf.cursor == 3

    def test_unmatched_beeps(self) -> None:
        term = VirtualTerminal()
        buf = make("a]")
        assert highlight_match(term, "> ", buf, delay=0) is False
        assert term.output == "\x07"

    def test_nested_match(self) -> None:
        term = VirtualTerminal()
        buf = make("f({x})")
        highlight_match(term, "", buf, delay=0)
        assert term.writes[0] == ("\rf({x})" + LEFT * 5).encode()


class TestDescribeBuffer:
    def test_caret_under_cursor(self) -> None:
        assert describe_buffer(make("abc", cursor=1)) == "cursor = 1 length = 3\nabc\n.^."

    def test_caret_past_end(self) -> None:
        assert describe_buffer(make("ab")) == "cursor = 2 length = 2\nab\n..^"
