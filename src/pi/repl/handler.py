"""The capability interface an embedding application implements."""

from __future__ import annotations

from typing import Any, Protocol


class ReplHandler(Protocol):
    """Evaluation, completion, prompt and history hooks for the line editor.

    All methods are called synchronously from the editor loop; while one
    runs, no input is processed.
    """

    def start(self) -> list[str] | None:
        """Called once before the loop. Returns history to seed the session with."""
        ...

    def stop(self, history: list[str]) -> None:
        """Called once when the loop ends, with the final session history."""
        ...

    def prompt(self) -> str: ...

    def eval(self, line: str) -> tuple[Any, bool]:
        """Evaluate a completed line.

        Returns ``(result, needs_more)``. When ``needs_more`` is true the
        handler keeps the partial input and the editor reads a continuation
        line without printing a prompt. Raising an exception reports the
        failure to the user and discards the line.
        """
        ...

    def complete(self, text: str) -> tuple[str, list[str]]:
        """Complete *text* (the line up to the cursor).

        Returns ``(addendum, candidates)``. The addendum is inserted as is;
        exactly one candidate means the completion is unambiguous.
        """
        ...

    def reset(self) -> None:
        """Discard partial multi-line state after a user interrupt."""
        ...
