"""Persistent key-value storage for the high score.

A tiny JSON-backed store following the settings persistence pattern: values
are read once on construction, changes only mark the store dirty, and
``flush()`` writes the file. The simulation updates the value every scoring
frame of a record run and flushes once the session ends, so the disk is not
touched from inside the frame loop.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict

from dinorun.logger import get_logger
from dinorun.settings import DATA_DIR

log = get_logger("highscore")

HIGHSCORE_FILE = os.path.join(DATA_DIR, "highscore.json")
HIGH_SCORE_KEY = "high_score"


class HighScoreStore:
    def __init__(self, path: str | None = None) -> None:
        self.path = path or HIGHSCORE_FILE
        self._dirty = False
        self._values: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            log.warn("Error reading high score file; regenerating", e)
            data = None
        if not isinstance(data, dict):
            if data is not None:
                log.warn("Unexpected high score file layout; regenerating")
            self._values = {}
            self._dirty = True
            self.flush()
            return {}
        return data

    @property
    def dirty(self) -> bool:
        return self._dirty

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if self._values.get(key) == value:
            return
        self._values[key] = value
        self._dirty = True

    def flush(self) -> None:
        """Write values to disk if dirty and clear the dirty flag."""
        if not self._dirty:
            return
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(self._values, f, indent=4, sort_keys=True)
            self._dirty = False
            log.debug("High score flushed")
        except IOError as e:
            log.error("Error saving high score", e)

    # Convenience accessors used by the simulation
    @property
    def high_score(self) -> int:
        try:
            return max(0, int(self.get(HIGH_SCORE_KEY, 0)))
        except (TypeError, ValueError):
            return 0

    @high_score.setter
    def high_score(self, value: int) -> None:
        self.set(HIGH_SCORE_KEY, int(value))


__all__ = ["HighScoreStore", "HIGH_SCORE_KEY", "HIGHSCORE_FILE"]
