"""pi-repl: Byte-oriented line editor and read-eval-print loop."""

# Configuration
from pi.repl.config import ReplConfig, load_config

# Handler interface and the Python adapter
from pi.repl.handler import ReplHandler
from pi.repl.python_handler import PythonHandler

# History persistence
from pi.repl.history import HistoryStore

# Edit buffer
from pi.repl.line_buffer import LineBuffer
from pi.repl.yank_register import YankRegister

# Rendering
from pi.repl.render import describe_buffer, draw_line, highlight_match

# Key dispatch loop
from pi.repl.repl import InputState, Repl, run_repl

# Terminal interface and implementation
from pi.repl.terminal import ProcessTerminal, Terminal

__all__ = [
    # Configuration
    "ReplConfig",
    "load_config",
    # Handler
    "PythonHandler",
    "ReplHandler",
    # History
    "HistoryStore",
    # Edit buffer
    "LineBuffer",
    "YankRegister",
    # Rendering
    "describe_buffer",
    "draw_line",
    "highlight_match",
    # Loop
    "InputState",
    "Repl",
    "run_repl",
    # Terminal
    "ProcessTerminal",
    "Terminal",
]
