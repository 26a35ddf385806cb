"""A ``ReplHandler`` that evaluates Python source."""

from __future__ import annotations

import codeop
import os
import re
import rlcompleter
import sys
from typing import Any

from pi.repl.history import HistoryStore

PRIMARY_PROMPT = ">>> "
CONTINUATION_PROMPT = "... "

_TRAILING_NAME_RE = re.compile(r"[A-Za-z_][\w.]*$")


class PythonHandler:
    """Evaluate Python lines in a persistent namespace.

    Incomplete statements (an open block or bracket) ask the editor for
    continuation lines; the pending lines are kept until the statement is
    complete, fails, or the user interrupts.
    """

    def __init__(
        self,
        namespace: dict[str, Any] | None = None,
        history_store: HistoryStore | None = None,
    ) -> None:
        self.namespace: dict[str, Any] = namespace if namespace is not None else {"__name__": "__console__"}
        self._history_store = history_store
        self._compiler = codeop.CommandCompiler()
        self._lines: list[str] = []
        self._completer = rlcompleter.Completer(self.namespace)

    @property
    def pending(self) -> bool:
        return bool(self._lines)

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> list[str]:
        if self._history_store is None:
            return []
        return self._history_store.load()

    def stop(self, history: list[str]) -> None:
        if self._history_store is not None:
            self._history_store.save(history)

    def prompt(self) -> str:
        return CONTINUATION_PROMPT if self._lines else PRIMARY_PROMPT

    def reset(self) -> None:
        self._lines.clear()

    # -- evaluation ---------------------------------------------------------

    def eval(self, line: str) -> tuple[str | None, bool]:
        self._lines.append(line)
        source = "\n".join(self._lines)
        try:
            code = self._compiler(source, "<stdin>", "single")
        except (OverflowError, SyntaxError, ValueError):
            self._lines.clear()
            raise
        if code is None:
            return None, True

        self._lines.clear()
        try:
            return self._run(source), False
        finally:
            sys.stdout.flush()

    def _run(self, source: str) -> str | None:
        """Run *source*; an expression's value comes back as its ``repr``."""
        try:
            expression = compile(source, "<stdin>", "eval")
        except SyntaxError:
            exec(compile(source, "<stdin>", "exec"), self.namespace)
            return None
        value = eval(expression, self.namespace)
        if value is None:
            return None
        self.namespace["_"] = value
        return repr(value)

    # -- completion ---------------------------------------------------------

    def complete(self, text: str) -> tuple[str, list[str]]:
        match = _TRAILING_NAME_RE.search(text)
        if match is None:
            return "", []
        token = match.group()

        candidates: list[str] = []
        state = 0
        while True:
            candidate = self._completer.complete(token, state)
            if candidate is None:
                break
            # rlcompleter decorates callables with "(" and keywords with " "
            candidate = candidate.rstrip("( ")
            if candidate not in candidates:
                candidates.append(candidate)
            state += 1

        if not candidates:
            return "", []
        prefix = os.path.commonprefix(candidates)
        return prefix[len(token) :], candidates
