"""Configuration for pi-repl. Reads optional settings from ~/.pi/repl.json."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "repl.json"
HISTORY_FILE_NAME = "repl_history.json"

# camelCase file key -> ReplConfig attribute
_FILE_KEYS: dict[str, str] = {
    "initialCapacity": "initial_capacity",
    "matchDelayMs": "match_delay_ms",
    "keepSignals": "keep_signals",
    "historyFile": "history_file",
    "historyLimit": "history_limit",
}


def get_config_dir() -> Path:
    return Path(os.environ.get("PI_CONFIG_DIR", Path.home() / ".pi"))


@dataclass
class ReplConfig:
    """Line editor and session settings."""

    initial_capacity: int = 1024
    match_delay_ms: int = 150
    keep_signals: bool = False
    history_file: str = field(default_factory=lambda: str(get_config_dir() / HISTORY_FILE_NAME))
    history_limit: int = 1000

    @property
    def match_delay(self) -> float:
        """Bracket-match pause in seconds."""
        return self.match_delay_ms / 1000.0


def config_from_dict(data: dict[str, Any]) -> ReplConfig:
    config = ReplConfig()
    for key, attr in _FILE_KEYS.items():
        value = data.get(key)
        if value is None:
            continue
        expected = type(getattr(config, attr))
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            logger.warning("Ignoring %s=%r: expected %s", key, value, expected.__name__)
            continue
        setattr(config, attr, value)
    return config


def load_config(path: str | Path | None = None) -> ReplConfig:
    """Load settings, falling back to defaults when the file is missing or bad."""
    config_path = Path(path) if path is not None else get_config_dir() / CONFIG_FILE_NAME
    if not config_path.exists():
        return ReplConfig()
    try:
        data = json.loads(config_path.read_text())
    except (OSError, ValueError) as e:
        logger.warning("Error reading config %s: %s", config_path, e)
        return ReplConfig()
    if not isinstance(data, dict):
        logger.warning("Error reading config %s: expected a JSON object", config_path)
        return ReplConfig()
    return config_from_dict(data)
