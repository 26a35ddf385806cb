"""Persist session history as a JSON array of lines."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 1000


class HistoryStore:
    """Loads and saves the line history kept between sessions."""

    def __init__(self, path: str | Path, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.path = Path(path)
        self.limit = limit

    def load(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError) as e:
            logger.warning("Error reading history %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            logger.warning("Error reading history %s: expected a JSON array", self.path)
            return []
        return [line for line in data if isinstance(line, str)]

    def save(self, history: list[str]) -> None:
        """Write the newest ``limit`` non-empty lines of *history*."""
        lines = [line for line in history if line]
        if self.limit >= 0:
            lines = lines[max(len(lines) - self.limit, 0) :]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(lines, indent=2))
        except OSError as e:
            logger.warning("Error saving history %s: %s", self.path, e)
