"""Edit buffer for a single line of input.

``LineBuffer`` owns the bytes being edited, the cursor, the yank register
and the session history. It performs no I/O; the dispatcher in
:mod:`pi.repl.repl` mutates it and :mod:`pi.repl.render` draws it.

Invariant after every operation: ``0 <= cursor <= length <= capacity``.
"""

from __future__ import annotations

from pi.repl.keys import SPACE, matching_open
from pi.repl.yank_register import YankRegister

DEFAULT_CAPACITY = 1024


class LineBuffer:
    """Mutable single-line edit buffer with kill/yank and history."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self._content = bytearray(capacity)
        self._length: int = 0
        self._cursor: int = 0
        self._register = YankRegister()
        self._history: list[str] = []
        self._history_index: int | None = None

    # -- properties ---------------------------------------------------------

    @property
    def length(self) -> int:
        return self._length

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def capacity(self) -> int:
        return len(self._content)

    @property
    def coalescing(self) -> bool:
        return self._register.coalescing

    @property
    def yanked(self) -> bytes:
        """Text currently held by the yank register."""
        return self._register.peek()

    @property
    def history(self) -> list[str]:
        return self._history

    @property
    def history_index(self) -> int | None:
        """Index of the history entry being browsed, or ``None``."""
        return self._history_index

    # -- basic state --------------------------------------------------------

    def is_empty(self) -> bool:
        return self._length == 0

    def clear(self) -> None:
        """Empty the line. History and the yank register survive."""
        self._length = 0
        self._cursor = 0
        self._register.coalescing = False

    def to_bytes(self) -> bytes:
        return bytes(self._content[: self._length])

    def text_before_cursor(self) -> str:
        return self._content[: self._cursor].decode("utf-8", errors="replace")

    def __str__(self) -> str:
        return self._content[: self._length].decode("utf-8", errors="replace")

    def __len__(self) -> int:
        return self._length

    # -- insertion / deletion -----------------------------------------------

    def insert(self, byte: int) -> None:
        """Insert *byte* at the cursor and advance past it."""
        self._register.coalescing = False
        if self._length == len(self._content):
            self._grow()
        if self._cursor < self._length:
            self._content[self._cursor + 1 : self._length + 1] = self._content[
                self._cursor : self._length
            ]
        self._content[self._cursor] = byte
        self._cursor += 1
        self._length += 1

    def insert_sequence(self, data: bytes | str) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        for byte in data:
            self.insert(byte)

    def delete(self) -> bool:
        """Remove the byte under the cursor. Returns False at end of line."""
        self._register.coalescing = False
        if self._cursor >= self._length:
            return False
        self._content[self._cursor : self._length - 1] = self._content[
            self._cursor + 1 : self._length
        ]
        self._length -= 1
        return True

    def kill_to_end(self) -> int:
        """Kill from the cursor to end of line into the yank register."""
        n = self._length - self._cursor
        self._register.store(bytes(self._content[self._cursor : self._length]))
        self._length = self._cursor
        return n

    def delete_range(self, begin: int, end: int) -> int:
        """Kill ``[begin, end)`` into the yank register and park the cursor at *begin*.

        *begin* is clamped up to 0 and *end* down to ``length``; a *begin*
        past the end of the line or a negative *end* is a no-op.
        Returns the number of bytes removed.
        """
        if begin > self._length or end < 0:
            return 0
        begin = max(begin, 0)
        end = min(end, self._length)
        n = end - begin
        if n <= 0:
            return 0
        killed = bytes(self._content[begin:end])
        self._register.store(killed, prepend=end <= self._cursor)
        self._content[begin : self._length - n] = self._content[end : self._length]
        self._length -= n
        self._cursor = begin
        return n

    def yank(self) -> int:
        """Re-insert the yank register at the cursor; returns its length."""
        text = self._register.peek()
        self.insert_sequence(text)
        self._register.coalescing = True
        return len(text)

    # -- word operations ----------------------------------------------------

    def word_backward(self) -> None:
        self._register.coalescing = False
        self._cursor = self._word_start(self._cursor)

    def word_forward(self) -> None:
        self._register.coalescing = False
        self._cursor = self._word_end(self._cursor)

    def word_backspace(self) -> int:
        """Kill from the start of the previous word to the cursor."""
        return self.delete_range(self._word_start(self._cursor), self._cursor)

    def word_delete(self) -> int:
        """Kill from the cursor to the end of the next word."""
        return self.delete_range(self._cursor, self._word_end(self._cursor))

    def _word_start(self, pos: int) -> int:
        # Spaces next to the cursor, then the word before them.
        while pos > 0 and self._content[pos - 1] == SPACE:
            pos -= 1
        while pos > 0 and self._content[pos - 1] != SPACE:
            pos -= 1
        return pos

    def _word_end(self, pos: int) -> int:
        while pos < self._length and self._content[pos] == SPACE:
            pos += 1
        while pos < self._length and self._content[pos] != SPACE:
            pos += 1
        return pos

    # -- cursor motion ------------------------------------------------------

    def backward(self) -> bool:
        self._register.coalescing = False
        if self._cursor > 0:
            self._cursor -= 1
            return True
        return False

    def forward(self) -> bool:
        self._register.coalescing = False
        if self._cursor < self._length:
            self._cursor += 1
            return True
        return False

    def begin(self) -> None:
        self._register.coalescing = False
        self._cursor = 0

    def end(self) -> None:
        self._register.coalescing = False
        self._cursor = self._length

    # -- brackets -----------------------------------------------------------

    def matching_open(self) -> int | None:
        """Find the opener for the closing bracket just before the cursor.

        Scans backward counting nested brackets of the same kind. Returns
        the opener's index, or ``None`` when the byte before the cursor is
        not a closing bracket or has no match.
        """
        if self._cursor == 0:
            return None
        close = self._content[self._cursor - 1]
        opener = matching_open(close)
        if opener is None:
            return None
        depth = 1
        for i in range(self._cursor - 2, -1, -1):
            byte = self._content[i]
            if byte == opener:
                depth -= 1
                if depth == 0:
                    return i
            elif byte == close:
                depth += 1
        return None

    # -- history ------------------------------------------------------------

    def add_to_history(self, line: str) -> None:
        self._history.append(line)
        self._history_index = None

    def prev_in_history(self) -> int:
        """Step to the next older history entry.

        Returns the larger of the old and new line lengths so the caller
        knows how many stale columns to blank.
        """
        n = self._length
        if not self._history:
            return n
        if self._history_index is None:
            self._history_index = len(self._history) - 1
        elif self._history_index > 0:
            self._history_index -= 1
        else:
            return n
        self._replace(self._history[self._history_index])
        return max(n, self._length)

    def next_in_history(self) -> int:
        """Step to the next newer history entry, or stop browsing past the newest."""
        n = self._length
        if self._history_index is None:
            return n
        if self._history_index + 1 >= len(self._history):
            self._history_index = None
            return n
        self._history_index += 1
        self._replace(self._history[self._history_index])
        return max(n, self._length)

    # -- private ------------------------------------------------------------

    def _replace(self, line: str) -> None:
        self._length = 0
        self._cursor = 0
        self.insert_sequence(line)

    def _grow(self) -> None:
        self._content.extend(bytes(max(len(self._content), 16)))
