"""Local store for the player's name and level (a small YAML file)."""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

PREFS_FILE = "prefs.yml"
KEY_NAME = "player_name"
KEY_LEVEL = "player_level"
DEFAULT_LEVEL = 1


class Prefs:
    """Persisted key-value pairs. A broken file is logged and read as empty."""

    def __init__(self, home_dir: Path):
        self.path = Path(home_dir) / PREFS_FILE
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not read prefs from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed prefs file {self.path}")
            return {}
        return data

    def _write(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                yaml.safe_dump(data, f, default_flow_style=False)

    def load_name(self) -> Optional[str]:
        name = self._read().get(KEY_NAME)
        return str(name) if name else None

    def save_name(self, name: str) -> None:
        self._write(KEY_NAME, name)

    def load_level(self) -> int:
        raw = self._read().get(KEY_LEVEL, DEFAULT_LEVEL)
        try:
            level = int(raw)
        except (TypeError, ValueError):
            logger.warning(f"Invalid stored level {raw!r}, using {DEFAULT_LEVEL}")
            return DEFAULT_LEVEL
        return level if level >= 1 else DEFAULT_LEVEL

    def save_level(self, level: int) -> None:
        self._write(KEY_LEVEL, int(level))
