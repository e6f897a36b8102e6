"""Game configuration loaded from YAML with environment overrides."""

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from mindwords.game_engine import ScoringRules

logger = logging.getLogger(__name__)

INPUTS_DIR = Path(__file__).parent / "inputs"
DEFAULT_SETTINGS_FILE = INPUTS_DIR / "settings.yml"
DEFAULT_WORDS_FILE = INPUTS_DIR / "words.yml"

DEFAULT_LEVELS: List[Tuple[int, int]] = [(4, 6), (5, 7), (6, 8), (7, 9)]


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def _parse_levels(raw: Any) -> List[Tuple[int, int]]:
    if not raw:
        return list(DEFAULT_LEVELS)
    levels = []
    for step in raw:
        lo, hi = int(step[0]), int(step[1])
        if lo < 1 or hi < lo:
            raise ValueError(f"Invalid level range: {step}")
        levels.append((lo, hi))
    return levels


@dataclass
class GameConfig:
    """Everything the game and its adapters need to run."""
    scoring: ScoringRules = field(default_factory=ScoringRules)
    levels: List[Tuple[int, int]] = field(default_factory=lambda: list(DEFAULT_LEVELS))

    word_url: str = "https://random-word-api.herokuapp.com/word"
    fetch_retries: int = 6
    connect_timeout: float = 15.0
    read_timeout: float = 20.0

    datamuse_url: str = "https://api.datamuse.com/words"
    api_ninjas_url: str = "https://api.api-ninjas.com/v1"
    api_ninjas_key: str = ""

    leaderboard_url: str = "https://www.dreamlo.com/lb"
    leaderboard_limit: int = 30
    name_max_length: int = 20
    placeholder_name: str = "Player"
    dreamlo_public_code: str = ""
    dreamlo_private_code: str = ""

    home_dir: Path = field(default_factory=lambda: Path.home() / ".mindwords")

    @property
    def timeout(self) -> Tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)

    def level_range(self, level: int) -> Tuple[int, int]:
        """Word length range for a level; clamps below 1 and above the table."""
        index = min(max(int(level), 1), len(self.levels)) - 1
        return self.levels[index]

    @classmethod
    def from_dict(cls, data: Dict[str, Any], env: Optional[Dict[str, str]] = None) -> "GameConfig":
        env = os.environ if env is None else env
        words = data.get("word_source") or {}
        tips = data.get("tips") or {}
        board = data.get("leaderboard") or {}

        config = cls(
            scoring=ScoringRules.from_dict(data.get("scoring")),
            levels=_parse_levels(data.get("levels")),
            word_url=words.get("url", cls.word_url),
            fetch_retries=int(words.get("fetch_retries", cls.fetch_retries)),
            connect_timeout=float(words.get("connect_timeout", cls.connect_timeout)),
            read_timeout=float(words.get("read_timeout", cls.read_timeout)),
            datamuse_url=tips.get("datamuse_url", cls.datamuse_url),
            api_ninjas_url=tips.get("api_ninjas_url", cls.api_ninjas_url),
            leaderboard_url=board.get("base_url", cls.leaderboard_url),
            leaderboard_limit=int(board.get("limit", cls.leaderboard_limit)),
            name_max_length=int(board.get("name_max_length", cls.name_max_length)),
            placeholder_name=str(board.get("placeholder_name", cls.placeholder_name)),
        )

        config.api_ninjas_key = env.get("API_NINJAS_KEY", "")
        config.dreamlo_public_code = env.get("DREAMLO_PUBLIC_CODE", "")
        config.dreamlo_private_code = env.get("DREAMLO_PRIVATE_CODE", "")
        if env.get("MINDWORDS_HOME"):
            config.home_dir = Path(env["MINDWORDS_HOME"]).expanduser()

        if config.fetch_retries < 1:
            raise ValueError("word_source.fetch_retries must be at least 1")
        return config


def load_config(config_file: Optional[Path] = None, env: Optional[Dict[str, str]] = None) -> GameConfig:
    """Load the bundled settings, merge a user file over them, apply env vars.

    Raises:
        FileNotFoundError: config_file was given but does not exist
    """
    data = _load_yaml(DEFAULT_SETTINGS_FILE)
    if config_file is not None:
        config_file = Path(config_file)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        data = _deep_merge(data, _load_yaml(config_file))
        logger.info(f"Loaded config overrides from {config_file}")
    return GameConfig.from_dict(data, env)
