"""Control bytes and byte classification for the line editor.

The editor reads one byte at a time, so keys are identified by their
conventional ASCII control-code assignments rather than by parsed escape
sequences.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Control bytes
# ---------------------------------------------------------------------------

CTRL_A = 0x01
CTRL_B = 0x02
CTRL_C = 0x03
CTRL_D = 0x04
CTRL_E = 0x05
CTRL_F = 0x06
BEL = 0x07
BACKSPACE = 0x08
TAB = 0x09
NEWLINE = 0x0A
CTRL_K = 0x0B
CTRL_L = 0x0C
RETURN = 0x0D
CTRL_N = 0x0E
CTRL_P = 0x10
CTRL_Y = 0x19
ESCAPE = 0x1B
SPACE = 0x20
DELETE = 0x7F

# ---------------------------------------------------------------------------
# Brackets
# ---------------------------------------------------------------------------

OPEN_PAREN = ord("(")
CLOSE_PAREN = ord(")")
OPEN_BRACKET = ord("[")
CLOSE_BRACKET = ord("]")
OPEN_BRACE = ord("{")
CLOSE_BRACE = ord("}")

_BRACKET_PAIRS: dict[int, int] = {
    CLOSE_PAREN: OPEN_PAREN,
    CLOSE_BRACKET: OPEN_BRACKET,
    CLOSE_BRACE: OPEN_BRACE,
}


def ctrl(char: str) -> int:
    """Return the control byte produced by Ctrl+*char* (``ctrl("a") == 1``)."""
    if len(char) != 1:
        raise ValueError(f"expected a single character, got {char!r}")
    return ord(char.upper()) & 0x1F


def is_printable(byte: int) -> bool:
    """True for the printable ASCII range 0x20-0x7E."""
    return SPACE <= byte < DELETE


def is_backward_delete(byte: int) -> bool:
    return byte in (DELETE, BACKSPACE)


def is_return(byte: int) -> bool:
    return byte in (RETURN, NEWLINE)


def matching_open(byte: int) -> int | None:
    """Return the opening bracket for a closing one, or ``None``."""
    return _BRACKET_PAIRS.get(byte)
