"""Word and tip sources for MindWords.

- RandomWordApiSource: one random word per call from random-word-api
- YamlWordSource: offline word list loaded from YAML (cached per file)
- TipSource: rhyme / similar-word tip from API Ninjas or Datamuse, never raises
"""

import logging
import os
import random
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import requests
import yaml

from ..utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

RANDOM_WORD_URL = "https://random-word-api.herokuapp.com/word"
DATAMUSE_URL = "https://api.datamuse.com/words"
API_NINJAS_URL = "https://api.api-ninjas.com/v1"

DEFAULT_TIMEOUT: Tuple[float, float] = (15.0, 20.0)  # (connect, read)

# Cache for loaded word lists (keyed by file path)
_WORDS_CACHE: Dict[str, List[str]] = {}


class WordSourceError(Exception):
    """A word could not be fetched (network, HTTP or payload problem)."""


class WordSource(ABC):
    """Abstract source of secret words."""

    @abstractmethod
    def fetch_random_word(self, min_len: int, max_len: int) -> str:
        """Return one lowercase word, ideally with min_len <= len <= max_len.

        Raises:
            WordSourceError: on any transient failure
        """


def _clean_word(raw: str) -> str:
    return "".join(ch for ch in str(raw).lower() if ch.isalpha())


class RandomWordApiSource(WordSource):
    """Random words over HTTP.

    The API only filters by exact length, so each call rolls a length inside
    the requested range. The caller is responsible for retrying.
    """

    def __init__(
        self,
        url: str = RANDOM_WORD_URL,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        rng: Optional[random.Random] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._rng = rng or random.Random()

    def fetch_random_word(self, min_len: int, max_len: int) -> str:
        target_len = self._rng.randint(min_len, max_len)
        try:
            response = requests.get(
                self.url,
                params={"number": 1, "length": target_len},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise WordSourceError(f"word request failed: {e}") from e
        except ValueError as e:
            raise WordSourceError(f"word response is not JSON: {e}") from e

        if not isinstance(data, list) or not data:
            raise WordSourceError(f"unexpected word payload: {data!r}")

        word = _clean_word(data[0])
        if not word:
            raise WordSourceError(f"empty word in payload: {data!r}")
        logger.debug(f"Fetched word of length {len(word)} (asked for {target_len})")
        return word


class YamlWordSource(WordSource):
    """Offline word source backed by a YAML file with a `words:` list."""

    def __init__(self, words_file: Path, rng: Optional[random.Random] = None):
        self.words_file = Path(words_file)
        self._rng = rng or random.Random()

    def load_words(self) -> List[str]:
        """Load words from YAML file (cached for performance)."""
        key = str(self.words_file)
        if key in _WORDS_CACHE:
            return _WORDS_CACHE[key]

        try:
            with open(self.words_file, "r") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.error(f"Words file not found: {self.words_file}")
            raise

        words = [w for w in (_clean_word(w) for w in data.get("words", [])) if w]
        if not words:
            raise ValueError(f"No words in {self.words_file}")
        _WORDS_CACHE[key] = words
        logger.debug(f"Loaded and cached {len(words)} words from {self.words_file}")
        return words

    def fetch_random_word(self, min_len: int, max_len: int) -> str:
        try:
            words = self.load_words()
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise WordSourceError(str(e)) from e

        candidates = [w for w in words if min_len <= len(w) <= max_len]
        if not candidates:
            raise WordSourceError(f"No words between {min_len} and {max_len} letters in {self.words_file}")
        return self._rng.choice(candidates)


class TipSource:
    """Best-effort tips: rhyme first, then a similar word, then a generic line."""

    def __init__(
        self,
        api_ninjas_key: Optional[str] = None,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        datamuse_url: str = DATAMUSE_URL,
        api_ninjas_url: str = API_NINJAS_URL,
    ):
        self.api_ninjas_key = api_ninjas_key if api_ninjas_key is not None else os.getenv("API_NINJAS_KEY", "")
        self.timeout = timeout
        self.datamuse_url = datamuse_url
        self.api_ninjas_url = api_ninjas_url

    @staticmethod
    def generic_tip(word: str) -> str:
        return f"Tip: think of a common {len(word)}-letter noun or verb."

    def tip_for(self, word: str) -> str:
        w = word.lower()
        try:
            if self.api_ninjas_key:
                rhyme = self._ninjas_rhyme(w)
                if rhyme:
                    return f"Tip: rhymes with '{rhyme}'."
                similar = self._ninjas_thesaurus(w)
                if similar:
                    return f"Tip: similar to '{similar}'."

            rhyme = self._datamuse("rel_rhy", w)
            if rhyme:
                return f"Tip: rhymes with '{rhyme}'."
            similar = self._datamuse("ml", w)
            if similar:
                return f"Tip: similar to '{similar}'."
        except Exception as e:
            logger.warning(f"Tip lookup failed, using generic tip: {e}")
        return self.generic_tip(w)

    @retry_with_backoff(max_retries=1, base_delay=0.5, exceptions=(requests.RequestException,))
    def _get_json(self, url: str, params: Dict, headers: Optional[Dict] = None):
        response = requests.get(url, params=params, headers=headers or {}, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _safe_get_json(self, url: str, params: Dict, headers: Optional[Dict] = None):
        try:
            return self._get_json(url, params, headers)
        except (requests.RequestException, ValueError) as e:
            logger.debug(f"Tip request to {url} failed: {e}")
            return None

    def _ninjas_rhyme(self, w: str) -> Optional[str]:
        data = self._safe_get_json(
            f"{self.api_ninjas_url}/rhyme", {"word": w}, {"X-Api-Key": self.api_ninjas_key}
        )
        if not isinstance(data, list):
            return None
        return next((str(x) for x in data if str(x).strip() and str(x) != w), None)

    def _ninjas_thesaurus(self, w: str) -> Optional[str]:
        data = self._safe_get_json(
            f"{self.api_ninjas_url}/thesaurus", {"word": w}, {"X-Api-Key": self.api_ninjas_key}
        )
        if not isinstance(data, dict):
            return None
        synonyms = data.get("synonyms") or []
        return next((str(x) for x in synonyms if str(x).strip() and str(x) != w), None)

    def _datamuse(self, param: str, w: str) -> Optional[str]:
        data = self._safe_get_json(self.datamuse_url, {param: w, "max": 5})
        if not isinstance(data, list):
            return None
        for item in data:
            candidate = (item.get("word") or "") if isinstance(item, dict) else ""
            if candidate.strip() and candidate != w:
                return candidate
        return None
