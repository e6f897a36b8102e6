"""Dreamlo leaderboard adapter.

Dreamlo identifies a board by two codes: the private code writes scores,
the public code reads them. Both come from the environment
(DREAMLO_PRIVATE_CODE / DREAMLO_PUBLIC_CODE) unless passed explicitly.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from ..utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

DREAMLO_BASE_URL = "https://www.dreamlo.com/lb"
DEFAULT_PLACEHOLDER_NAME = "Player"
DEFAULT_NAME_MAX_LENGTH = 20


@dataclass(frozen=True)
class ScoreRow:
    name: str
    score: int
    seconds: int


def sanitize_name(
    raw: Optional[str],
    max_length: int = DEFAULT_NAME_MAX_LENGTH,
    placeholder: str = DEFAULT_PLACEHOLDER_NAME,
) -> str:
    """Make a player name safe to submit.

    Trims, collapses internal whitespace, strips non-ASCII characters and
    truncates. Falls back to the placeholder when nothing is left.
    """
    name = re.sub(r"\s+", " ", (raw or "").strip())
    name = re.sub(r"[^\x00-\x7f]", "", name)
    name = name[:max_length].strip()
    return name or placeholder


def _to_int(value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def parse_leaderboard(payload: Any, limit: int = 20) -> List[ScoreRow]:
    """Parse Dreamlo's JSON into rows sorted by score, highest first.

    `dreamlo.leaderboard.entry` is an object for a single entry, a list for
    several, and missing (or leaderboard is null) for an empty board.
    """
    if not isinstance(payload, dict):
        raise ValueError("leaderboard payload is not an object")
    board = (payload.get("dreamlo") or {}).get("leaderboard") or {}
    if not isinstance(board, dict):
        raise ValueError("leaderboard payload has no board")

    entries = board.get("entry")
    if entries is None:
        entries = []
    elif isinstance(entries, dict):
        entries = [entries]
    elif not isinstance(entries, list):
        raise ValueError("leaderboard entry has an unexpected type")

    rows = [
        ScoreRow(
            name=str(e.get("name") or ""),
            score=_to_int(e.get("score")),
            seconds=_to_int(e.get("seconds")),
        )
        for e in entries
        if isinstance(e, dict)
    ]
    # sorted() is stable, so ties keep their original order
    rows = sorted(rows, key=lambda r: r.score, reverse=True)
    return rows[:limit]


class DreamloClient:
    """Submit and read scores. Failures return False / [] and set last_error."""

    def __init__(
        self,
        public_code: Optional[str] = None,
        private_code: Optional[str] = None,
        base_url: str = DREAMLO_BASE_URL,
        timeout: Tuple[float, float] = (15.0, 20.0),
        name_max_length: int = DEFAULT_NAME_MAX_LENGTH,
        placeholder_name: str = DEFAULT_PLACEHOLDER_NAME,
    ):
        self.public_code = public_code or os.getenv("DREAMLO_PUBLIC_CODE", "")
        self.private_code = private_code or os.getenv("DREAMLO_PRIVATE_CODE", "")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.name_max_length = name_max_length
        self.placeholder_name = placeholder_name
        self.last_error: Optional[str] = None

    @retry_with_backoff(max_retries=2, base_delay=1.0, exceptions=(requests.ConnectionError, requests.Timeout))
    def _get(self, url: str) -> requests.Response:
        return requests.get(url, timeout=self.timeout)

    def add_score(self, name: str, score: int, seconds: int) -> bool:
        """Submit a score. Returns True when Dreamlo acknowledged it."""
        self.last_error = None
        if not self.private_code:
            self.last_error = "DREAMLO_PRIVATE_CODE not set"
            return False

        clean = sanitize_name(name, self.name_max_length, self.placeholder_name)
        url = (
            f"{self.base_url}/{self.private_code}/add-pipe/"
            f"{quote(clean, safe='')}/{int(score)}/{int(seconds)}"
        )
        try:
            response = self._get(url)
        except requests.RequestException as e:
            self.last_error = f"add failed: {e}"
            logger.warning(self.last_error)
            return False

        body = response.text or ""
        if 200 <= response.status_code < 300 and ("ok" in body.lower() or "|" in body):
            logger.info(f"Submitted score {score} for {clean!r}")
            return True

        self.last_error = f"add failed: HTTP {response.status_code}"
        logger.warning(self.last_error)
        return False

    def top_scores(self, limit: int = 20) -> List[ScoreRow]:
        """Fetch the board, highest score first."""
        self.last_error = None
        if not self.public_code:
            self.last_error = "DREAMLO_PUBLIC_CODE not set"
            return []

        try:
            response = self._get(f"{self.base_url}/{self.public_code}/json")
        except requests.RequestException as e:
            self.last_error = f"json failed: {e}"
            logger.warning(self.last_error)
            return []

        if not 200 <= response.status_code < 300:
            self.last_error = f"json failed: HTTP {response.status_code}"
            logger.warning(self.last_error)
            return []

        try:
            return parse_leaderboard(response.json(), limit)
        except ValueError as e:
            self.last_error = "bad json"
            logger.warning(f"Could not parse leaderboard: {e}")
            return []
