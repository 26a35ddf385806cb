"""Redraw the edited line on the terminal.

Every redraw rewrites the whole line: carriage return, prompt, buffer
contents, blanks over columns left stale by a shrinking edit, then enough
single-column cursor moves to land on the logical cursor.
"""

from __future__ import annotations

import time

from pi.repl.line_buffer import LineBuffer
from pi.repl.terminal import BEEP, CURSOR_BACKWARD, Terminal


def draw_line(
    terminal: Terminal,
    prompt: str,
    buffer: LineBuffer,
    extra: int = 0,
    cursor: int | None = None,
) -> None:
    """Render *buffer* after *prompt* on the current terminal line.

    Args:
        extra: Number of blank columns to write after the text, covering
            characters the previous rendering had beyond the new end.
        cursor: Column to leave the cursor at instead of ``buffer.cursor``.
    """
    if cursor is None:
        cursor = buffer.cursor
    extra = max(extra, 0)
    out = bytearray(b"\r")
    out += prompt.encode("utf-8")
    out += buffer.to_bytes()
    out += b" " * extra
    out += CURSOR_BACKWARD * (buffer.length + extra - cursor)
    terminal.write(bytes(out))


def highlight_match(
    terminal: Terminal,
    prompt: str,
    buffer: LineBuffer,
    delay: float,
) -> bool:
    """Flash the cursor on the opener matching the bracket just typed.

    The buffer's own cursor is never moved. Beeps and returns False when
    there is no matching opener.
    """
    position = buffer.matching_open()
    if position is None:
        terminal.write(BEEP)
        return False
    draw_line(terminal, prompt, buffer, cursor=position)
    time.sleep(delay)
    draw_line(terminal, prompt, buffer)
    return True


def describe_buffer(buffer: LineBuffer) -> str:
    """Multi-line dump of the buffer with a caret under the cursor."""
    text = str(buffer)
    carets = "".join("^" if i == buffer.cursor else "." for i in range(buffer.length))
    if buffer.cursor == buffer.length:
        carets += "^"
    return f"cursor = {buffer.cursor} length = {buffer.length}\n{text}\n{carets}"
