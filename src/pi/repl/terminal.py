"""Terminal abstraction for byte-at-a-time line editing.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` that
reads single bytes from stdin and writes to stdout, switching the tty into
raw (or cbreak) mode for the duration of a ``raw_mode()`` block.
"""

from __future__ import annotations

import contextlib
import logging
import os
import sys
import termios
from typing import Iterator, Protocol

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

CURSOR_BACKWARD = b"\x1b[1D"
CURSOR_FORWARD = b"\x1b[1C"
BEEP = b"\x07"


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for the byte channel the line editor talks to."""

    def read_byte(self) -> int:
        """Block until one byte is available.

        Raises ``EOFError`` when the input stream is closed and ``OSError``
        when reading fails.
        """
        ...

    def write(self, data: bytes) -> None: ...

    def raw_mode(self) -> contextlib.AbstractContextManager[None]:
        """Context manager that disables echo and line buffering."""
        ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by the process's stdin and stdout.

    ``keep_signals`` selects cbreak mode: the tty still turns Ctrl-C into
    SIGINT. Otherwise Ctrl-C arrives as an ordinary byte.
    """

    def __init__(
        self,
        fd_in: int | None = None,
        fd_out: int | None = None,
        *,
        keep_signals: bool = False,
    ) -> None:
        self._fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self._fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        self._keep_signals = keep_signals
        self._original_termios: list | None = None

    @property
    def active(self) -> bool:
        """True while the tty is switched out of canonical mode."""
        return self._original_termios is not None

    # -- raw mode -----------------------------------------------------------

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Switch the tty out of canonical mode, restoring it on exit.

        Raises ``termios.error`` if stdin is not a terminal; in that case
        nothing has been changed.
        """
        if self._original_termios is not None:
            raise RuntimeError("terminal is already in raw mode")

        original = termios.tcgetattr(self._fd_in)
        termios.tcsetattr(
            self._fd_in,
            termios.TCSADRAIN,
            _raw_attributes(original, keep_signals=self._keep_signals),
        )
        self._original_termios = original
        logger.debug("terminal mode acquired (keep_signals=%s)", self._keep_signals)
        try:
            yield
        finally:
            termios.tcsetattr(self._fd_in, termios.TCSADRAIN, original)
            self._original_termios = None
            logger.debug("terminal mode restored")

    # -- I/O ----------------------------------------------------------------

    def read_byte(self) -> int:
        data = os.read(self._fd_in, 1)
        if not data:
            raise EOFError("terminal input closed")
        return data[0]

    def write(self, data: bytes) -> None:
        """Write all of *data* directly to the output descriptor."""
        view = memoryview(data)
        while view:
            written = os.write(self._fd_out, view)
            view = view[written:]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _raw_attributes(attrs: list, *, keep_signals: bool) -> list:
    """Return a copy of *attrs* with echo, canonical input and CR mapping off.

    Output post-processing is left alone so ``\\n`` still moves to the start
    of the next line.
    """
    iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
    iflag &= ~(
        termios.ISTRIP
        | termios.INLCR
        | termios.ICRNL
        | termios.IGNCR
        | termios.IXON
        | termios.IXOFF
    )
    lflag &= ~(termios.ECHO | termios.ICANON)
    if not keep_signals:
        lflag &= ~termios.ISIG
    cc = list(cc)
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    return [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]
