"""The read-eval-print loop: key dispatch on top of ``LineBuffer``.

``Repl.feed`` is the single dispatch function. It interprets one input
byte according to the current ``InputState`` and the previous byte,
mutates the buffer, redraws the line, and hands completed lines to the
``ReplHandler``.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable

from pi.repl.config import ReplConfig
from pi.repl.handler import ReplHandler
from pi.repl.keys import (
    CTRL_A,
    CTRL_B,
    CTRL_C,
    CTRL_D,
    CTRL_E,
    CTRL_F,
    CTRL_K,
    CTRL_L,
    CTRL_N,
    CTRL_P,
    CTRL_Y,
    ESCAPE,
    TAB,
    is_backward_delete,
    is_printable,
    is_return,
    matching_open,
)
from pi.repl.line_buffer import LineBuffer
from pi.repl.render import describe_buffer, draw_line, highlight_match
from pi.repl.terminal import BEEP, CURSOR_BACKWARD, CURSOR_FORWARD, ProcessTerminal, Terminal

logger = logging.getLogger(__name__)

INTERRUPT_NOTICE = "\n*** Interrupt ***\n"


class InputState(Enum):
    NORMAL = auto()
    META_PENDING = auto()


class Repl:
    """Line editor session bound to one handler and one terminal."""

    def __init__(
        self,
        handler: ReplHandler,
        terminal: Terminal,
        config: ReplConfig | None = None,
    ) -> None:
        self._handler = handler
        self._terminal = terminal
        self._config = config or ReplConfig()
        self._buffer = LineBuffer(self._config.initial_capacity)
        self._state = InputState.NORMAL
        self._last_byte: int | None = None
        self._completions: list[str] = []
        self._prompt = ""
        self._running = False

        self._control_actions: dict[int, Callable[[], None]] = {
            CTRL_A: self._begin,
            CTRL_B: self._backward,
            CTRL_C: self._interrupt,
            CTRL_D: self._end_of_input,
            CTRL_E: self._end,
            CTRL_F: self._forward,
            CTRL_K: self._kill_to_end,
            CTRL_L: self._redraw,
            CTRL_N: self._next_in_history,
            CTRL_P: self._prev_in_history,
            CTRL_Y: self._yank,
            TAB: self._complete,
        }
        self._meta_actions: dict[int, Callable[[], None]] = {
            ord("d"): self._word_delete,
            ord("b"): self._word_backward,
            ord("f"): self._word_forward,
        }

    # -- properties ---------------------------------------------------------

    @property
    def buffer(self) -> LineBuffer:
        return self._buffer

    @property
    def state(self) -> InputState:
        return self._state

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def completions(self) -> list[str]:
        """Candidates from the last ambiguous completion request."""
        return self._completions

    @property
    def running(self) -> bool:
        return self._running

    # -- session ------------------------------------------------------------

    def start(self) -> None:
        """Seed history from the handler and print the first prompt."""
        history = self._handler.start()
        if history:
            self._buffer.history.extend(history)
        logger.debug("session started with %d history entries", len(self._buffer.history))
        self._prompt = self._handler.prompt()
        self._write(self._prompt)
        self._running = True

    def run(self) -> None:
        """Read and dispatch bytes until end-of-input on an empty line.

        Anything that ends the session early (a failed read, ``SystemExit``
        from the handler, an uncaught error) still passes the history to the
        handler's ``stop`` hook, exactly once, before it propagates.
        """
        self.start()
        try:
            while self._running:
                try:
                    byte = self._terminal.read_byte()
                except (OSError, EOFError, KeyboardInterrupt) as e:
                    logger.debug("terminal read failed: %r", e)
                    raise
                self.feed(byte)
        finally:
            if self._running:
                self._stop()

    def feed(self, byte: int) -> bool:
        """Dispatch one input byte. Returns False once the session has ended."""
        if self._state is InputState.META_PENDING:
            self._state = InputState.NORMAL
            self._dispatch_meta(byte)
        else:
            self._dispatch_normal(byte)
        self._last_byte = byte
        return self._running

    # -- dispatch -----------------------------------------------------------

    def _dispatch_normal(self, byte: int) -> None:
        if byte != TAB:
            self._completions = []

        action = self._control_actions.get(byte)
        if action is not None:
            action()
        elif byte == ESCAPE:
            self._state = InputState.META_PENDING
        elif is_backward_delete(byte):
            self._backward_delete()
        elif is_return(byte):
            self._submit()
        elif is_printable(byte):
            self._insert(byte)
        else:
            self._beep()

    def _dispatch_meta(self, byte: int) -> None:
        action = self._meta_actions.get(byte)
        if action is not None:
            action()
        elif is_backward_delete(byte):
            self._word_backspace()
        else:
            self._beep()

    # -- editing actions ----------------------------------------------------

    def _insert(self, byte: int) -> None:
        self._buffer.insert(byte)
        self._draw()
        if matching_open(byte) is not None:
            highlight_match(self._terminal, self._prompt, self._buffer, self._config.match_delay)

    def _begin(self) -> None:
        self._buffer.begin()
        self._draw()

    def _end(self) -> None:
        self._buffer.end()
        self._draw()

    def _forward(self) -> None:
        if self._buffer.forward():
            self._terminal.write(CURSOR_FORWARD)
            self._draw()
        else:
            self._beep()

    def _backward(self) -> None:
        if self._buffer.backward():
            self._terminal.write(CURSOR_BACKWARD)
            self._draw()
        else:
            self._beep()

    def _backward_delete(self) -> None:
        if self._buffer.backward():
            self._buffer.delete()
            self._draw(1)
        else:
            self._beep()

    def _forward_delete(self) -> None:
        if self._buffer.delete():
            self._draw(1)
        else:
            self._beep()

    def _kill_to_end(self) -> None:
        self._draw(self._buffer.kill_to_end())

    def _yank(self) -> None:
        self._buffer.yank()
        self._draw()

    def _word_backspace(self) -> None:
        self._draw(self._buffer.word_backspace())

    def _word_delete(self) -> None:
        self._draw(self._buffer.word_delete())

    def _word_backward(self) -> None:
        self._buffer.word_backward()
        self._draw()

    def _word_forward(self) -> None:
        self._buffer.word_forward()
        self._draw()

    def _prev_in_history(self) -> None:
        widest = self._buffer.prev_in_history()
        self._draw(widest - self._buffer.length)

    def _next_in_history(self) -> None:
        widest = self._buffer.next_in_history()
        self._draw(widest - self._buffer.length)

    def _redraw(self) -> None:
        logger.debug("buffer state:\n%s", describe_buffer(self._buffer))
        self._write("\n")
        self._draw()

    # -- completion ---------------------------------------------------------

    def _complete(self) -> None:
        if self._last_byte == TAB and self._completions:
            out = "".join(f"\n{option}" for option in self._completions)
            self._write(out + "\n")
            self._draw()
            return

        addendum, candidates = self._handler.complete(self._buffer.text_before_cursor())
        if addendum:
            self._buffer.insert_sequence(addendum)
        if len(candidates) == 1:
            self._buffer.insert(ord(" "))
            self._completions = []
        else:
            self._completions = list(candidates)
            self._beep()
        self._draw()

    # -- session control ----------------------------------------------------

    def _interrupt(self) -> None:
        self._write(INTERRUPT_NOTICE)
        self._buffer.clear()
        self._handler.reset()
        self._prompt = self._handler.prompt()
        self._draw()

    def _end_of_input(self) -> None:
        if not self._buffer.is_empty():
            self._forward_delete()
            return
        self._write("\n")
        self._stop()

    def _submit(self) -> None:
        echoed = not self._buffer.is_empty()
        if echoed:
            self._write("\n")
        line = str(self._buffer)
        self._buffer.add_to_history(line)
        self._buffer.clear()

        try:
            result, needs_more = self._handler.eval(line)
        except Exception as e:
            logger.debug("evaluation failed for %r", line, exc_info=True)
            self._write(f"*** {e}\n")
            self._buffer.clear()
            self._prompt = self._handler.prompt()
            self._write(self._prompt)
            return

        if result is not None and not needs_more:
            self._write(f"{result}\n")
        elif not echoed:
            # Nothing ended the prompt line yet.
            self._write("\n")
        if needs_more:
            self._prompt = ""
            return
        self._prompt = self._handler.prompt()
        self._write(self._prompt)

    def _stop(self) -> None:
        self._running = False
        logger.debug("session stopped with %d history entries", len(self._buffer.history))
        self._handler.stop(list(self._buffer.history))

    # -- output helpers -----------------------------------------------------

    def _draw(self, extra: int = 0) -> None:
        draw_line(self._terminal, self._prompt, self._buffer, extra)

    def _beep(self) -> None:
        self._terminal.write(BEEP)

    def _write(self, text: str) -> None:
        if text:
            self._terminal.write(text.encode("utf-8"))


def run_repl(
    handler: ReplHandler,
    terminal: Terminal | None = None,
    config: ReplConfig | None = None,
) -> None:
    """Run an interactive session until end-of-input.

    The terminal is switched into raw mode once for the whole session and
    restored on every exit path. Errors acquiring the mode propagate before
    the handler is started; read errors propagate after ``handler.stop``.
    """
    config = config or ReplConfig()
    if terminal is None:
        terminal = ProcessTerminal(keep_signals=config.keep_signals)
    with terminal.raw_mode():
        Repl(handler, terminal, config).run()
