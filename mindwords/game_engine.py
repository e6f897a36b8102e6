"""Round engine for MindWords.

This module holds the scoring and guess-resolution rules for a single round:
- The controller (game.py) owns the round lifecycle and cross-round counters
- This module is the single source of truth for what each player action costs

Rules:
- Start at 100 points, never below 0
- Wrong full-word guess: -10 and one try used (max 10 tries)
- Letter count and length clues: -5 each, no try used
- One hint per round after 5 wrong guesses: reveals a random hidden letter, -5
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Set

from mindwords.errors import InvalidGuessError, RoundOverError

MASK_GLYPH = "•"


class RoundState(str, Enum):
    ACTIVE = "active"
    WON = "won"
    LOST_OUT_OF_TRIES = "lost_out_of_tries"


class Outcome(str, Enum):
    CONTINUE = "continue"
    WIN = "win"
    OUT_OF_TRIES = "out_of_tries"


class HintStatus(str, Enum):
    REVEALED = "revealed"
    LOCKED = "locked"
    ALREADY_USED = "already_used"
    NOTHING_LEFT = "nothing_left"


@dataclass(frozen=True)
class ScoringRules:
    """Point values and limits for a round."""
    start_score: int = 100
    wrong_guess_penalty: int = 10
    clue_penalty: int = 5
    hint_unlock_tries: int = 5
    max_tries: int = 10

    def __post_init__(self):
        if not 1 <= self.start_score <= 100:
            raise ValueError(f"start_score must be between 1 and 100, got {self.start_score}")
        for name in ("wrong_guess_penalty", "clue_penalty", "max_tries"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        if self.hint_unlock_tries < 0:
            raise ValueError(f"hint_unlock_tries must not be negative, got {self.hint_unlock_tries}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ScoringRules":
        """Create rules from a config mapping, ignoring unknown keys."""
        data = data or {}
        known = {k: int(v) for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass(frozen=True)
class GuessResult:
    """Result of a full-word guess."""
    outcome: Outcome
    score: int
    tries: int
    answer: Optional[str] = None  # only set on OUT_OF_TRIES

    @property
    def is_terminal(self) -> bool:
        return self.outcome in (Outcome.WIN, Outcome.OUT_OF_TRIES)


@dataclass(frozen=True)
class LetterCountResult:
    """Result of a letter-count clue."""
    letter: str
    count: int
    positions: List[int] = field(default_factory=list)
    score: int = 0

    @property
    def message(self) -> str:
        display = self.letter.upper()
        if self.count == 0:
            return f"No '{display}' here."
        verb = "is" if self.count == 1 else "are"
        return f"There {verb} {self.count} '{display}'."


@dataclass(frozen=True)
class LengthClueResult:
    """Result of a length clue."""
    length: int
    score: int

    @property
    def message(self) -> str:
        return f"It has {self.length} letters."


@dataclass(frozen=True)
class HintResult:
    """Result of a hint request. index/letter are only set when REVEALED."""
    status: HintStatus
    score: int
    index: Optional[int] = None
    letter: Optional[str] = None
    unlock_tries: int = 5

    @property
    def granted(self) -> bool:
        return self.status == HintStatus.REVEALED

    @property
    def message(self) -> str:
        if self.status == HintStatus.LOCKED:
            return f"Hints unlock after {self.unlock_tries} guesses."
        if self.status == HintStatus.ALREADY_USED:
            return "Hint already used."
        if self.status == HintStatus.NOTHING_LEFT:
            return "Everything's already revealed."
        return f"Revealed: position {self.index + 1} is '{self.letter.upper()}'."


def validate_guess(candidate: str, length: int) -> str:
    """Check a full-word guess before it reaches the engine.

    Args:
        candidate: Raw player input
        length: Length of the secret word

    Returns:
        The trimmed candidate

    Raises:
        InvalidGuessError: blank input, non-letters, or wrong length
    """
    cleaned = (candidate or "").strip()
    if not cleaned:
        raise InvalidGuessError("Type your guess")
    if not cleaned.isalpha():
        raise InvalidGuessError("Use letters only (A-Z).")
    if len(cleaned) != length:
        raise InvalidGuessError(f"Your guess must be {length} letters.")
    return cleaned


def validate_letter(letter: str) -> str:
    """Check a letter-count input and return it lowercased."""
    cleaned = (letter or "").strip()
    if not cleaned:
        raise InvalidGuessError("Type a letter")
    if len(cleaned) != 1 or not cleaned.isalpha():
        raise InvalidGuessError("Use a single letter (A-Z).")
    return cleaned.lower()


class Round:
    """One play instance bound to a single secret word.

    The round is not thread-safe; the controller serializes access to it.
    Once guess() returns a terminal outcome every mutating call raises
    RoundOverError.
    """

    def __init__(
        self,
        answer: str,
        max_tries: Optional[int] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
    ):
        word = (answer or "").strip().lower()
        if not word or not word.isalpha():
            raise ValueError(f"Answer must be a non-empty alphabetic word, got {answer!r}")

        self.rules = rules or ScoringRules()
        self._answer = word
        self._max_tries = max_tries if max_tries is not None else self.rules.max_tries
        if self._max_tries < 1:
            raise ValueError(f"max_tries must be at least 1, got {self._max_tries}")

        self._score = self.rules.start_score
        self._tries = 0
        self._revealed: Set[int] = set()
        self._hint_used = False
        self._state = RoundState.ACTIVE
        self._rng = rng or random.Random()

    @property
    def answer(self) -> str:
        return self._answer

    @property
    def score(self) -> int:
        return self._score

    @property
    def tries(self) -> int:
        return self._tries

    @property
    def max_tries(self) -> int:
        return self._max_tries

    @property
    def revealed_positions(self) -> FrozenSet[int]:
        return frozenset(self._revealed)

    @property
    def hint_used(self) -> bool:
        return self._hint_used

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def is_terminal(self) -> bool:
        return self._state != RoundState.ACTIVE

    @property
    def hint_unlocked(self) -> bool:
        return self._tries >= self.rules.hint_unlock_tries

    @property
    def is_fully_revealed(self) -> bool:
        return len(self._revealed) == len(self._answer)

    def __len__(self) -> int:
        return len(self._answer)

    def mask(self, glyph: str = MASK_GLYPH) -> str:
        """Player-visible rendering of the answer."""
        return "".join(
            ch if i in self._revealed else glyph
            for i, ch in enumerate(self._answer)
        )

    def _ensure_active(self) -> None:
        if self.is_terminal:
            raise RoundOverError(f"Round already finished ({self._state.value})")

    def _charge(self, points: int) -> None:
        self._score = max(0, self._score - points)

    def guess(self, candidate: str) -> GuessResult:
        """Resolve a full-word guess.

        A wrong guess uses a try and costs points before the out-of-tries
        check, so the last allowed guess both penalizes and ends the round.
        """
        self._ensure_active()
        word = validate_guess(candidate, len(self._answer))

        if word.lower() == self._answer:
            self._revealed.update(range(len(self._answer)))
            self._state = RoundState.WON
            return GuessResult(Outcome.WIN, self._score, self._tries)

        self._tries += 1
        self._charge(self.rules.wrong_guess_penalty)

        if self._tries >= self._max_tries:
            self._state = RoundState.LOST_OUT_OF_TRIES
            return GuessResult(Outcome.OUT_OF_TRIES, self._score, self._tries, answer=self._answer)
        return GuessResult(Outcome.CONTINUE, self._score, self._tries)

    def letter_count(self, letter: str) -> LetterCountResult:
        """Count a letter, reveal its positions and charge a clue."""
        self._ensure_active()
        ch = validate_letter(letter)

        positions = [i for i, a in enumerate(self._answer) if a == ch]
        self._revealed.update(positions)
        self._charge(self.rules.clue_penalty)
        return LetterCountResult(letter=ch, count=len(positions), positions=positions, score=self._score)

    def length_clue(self) -> LengthClueResult:
        """Charge a clue and report the answer length."""
        self._ensure_active()
        self._charge(self.rules.clue_penalty)
        return LengthClueResult(length=len(self._answer), score=self._score)

    def hint_letter(self) -> HintResult:
        """Reveal one hidden letter, once per round, after enough wrong guesses."""
        self._ensure_active()
        unlock = self.rules.hint_unlock_tries

        if not self.hint_unlocked:
            return HintResult(HintStatus.LOCKED, self._score, unlock_tries=unlock)
        if self._hint_used:
            return HintResult(HintStatus.ALREADY_USED, self._score, unlock_tries=unlock)

        slots = [i for i in range(len(self._answer)) if i not in self._revealed]
        if not slots:
            return HintResult(HintStatus.NOTHING_LEFT, self._score, unlock_tries=unlock)

        index = self._rng.choice(slots)
        self._revealed.add(index)
        self._hint_used = True
        self._charge(self.rules.clue_penalty)
        return HintResult(
            HintStatus.REVEALED,
            self._score,
            index=index,
            letter=self._answer[index],
            unlock_tries=unlock,
        )

    def to_dict(self, include_answer: bool = True) -> Dict[str, Any]:
        """Serialize the round state."""
        data: Dict[str, Any] = {
            "mask": self.mask(),
            "length": len(self._answer),
            "score": self._score,
            "tries": self._tries,
            "max_tries": self._max_tries,
            "revealed": sorted(self._revealed),
            "hint_used": self._hint_used,
            "state": self._state.value,
        }
        if include_answer:
            data["answer"] = self._answer
        return data

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
    ) -> "Round":
        """Rebuild a round from to_dict() output (answer required)."""
        if "answer" not in data:
            raise ValueError("Cannot restore a round without its answer")
        rnd = cls(data["answer"], max_tries=data.get("max_tries"), rules=rules, rng=rng)

        score = int(data.get("score", rnd.rules.start_score))
        tries = int(data.get("tries", 0))
        revealed = {int(i) for i in data.get("revealed", [])}
        if not 0 <= score <= rnd.rules.start_score:
            raise ValueError(f"score out of range: {score}")
        if not 0 <= tries <= rnd.max_tries:
            raise ValueError(f"tries out of range: {tries}")
        if any(i < 0 or i >= len(rnd.answer) for i in revealed):
            raise ValueError("revealed position outside the answer")

        rnd._score = score
        rnd._tries = tries
        rnd._revealed = revealed
        rnd._hint_used = bool(data.get("hint_used", False))
        rnd._state = RoundState(data.get("state", RoundState.ACTIVE.value))
        return rnd
