"""CLI entry point for pi-repl. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys
import termios

import click

from pi.repl.config import load_config
from pi.repl.history import HistoryStore
from pi.repl.python_handler import PythonHandler
from pi.repl.repl import run_repl

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@click.command()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None, help="Settings file (default: ~/.pi/repl.json)")
@click.option("--history-file", type=click.Path(dir_okay=False), default=None, help="Where to load and save line history")
@click.option("--no-history", is_flag=True, help="Do not load or save history")
@click.option("--cbreak", is_flag=True, help="Let the terminal turn Ctrl-C into SIGINT")
@click.option("--match-delay", type=click.IntRange(min=0), default=None, help="Bracket-match flash in milliseconds")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Log level",
)
def main(config_path, history_file, no_history, cbreak, match_delay, log_file, log_level):
    """Interactive Python prompt with Emacs-style line editing."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=_LOG_FORMAT,
        filename=log_file,
    )

    config = load_config(config_path)
    if history_file:
        config.history_file = history_file
    if cbreak:
        config.keep_signals = True
    if match_delay is not None:
        config.match_delay_ms = match_delay

    store = None if no_history else HistoryStore(config.history_file, config.history_limit)
    handler = PythonHandler(history_store=store)

    try:
        run_repl(handler, config=config)
    except termios.error as e:
        click.echo(f"Error: cannot configure terminal: {e}", err=True)
        sys.exit(1)
    except EOFError:
        click.echo()
    except KeyboardInterrupt:
        click.echo()
        sys.exit(130)
    except (OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
