"""Single-slot register for Emacs-style kill/yank operations."""

from __future__ import annotations


class YankRegister:
    """Holds the most recently killed text.

    While ``coalescing`` is set, consecutive kills merge into the stored
    text instead of replacing it.
    """

    def __init__(self) -> None:
        self._text: bytes = b""
        self.coalescing: bool = False

    def store(self, text: bytes, *, prepend: bool = False) -> None:
        """Record killed text and start coalescing.

        Args:
            text: The killed bytes. An empty kill still replaces the stored
                text unless coalescing.
            prepend: When coalescing, put *text* in front (backward kill)
                instead of after (forward kill).
        """
        if self.coalescing:
            self._text = text + self._text if prepend else self._text + text
        else:
            self._text = text
        self.coalescing = True

    def peek(self) -> bytes:
        """Get the stored text without modifying the register."""
        return self._text

    @property
    def length(self) -> int:
        return len(self._text)
