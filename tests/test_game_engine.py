"""Tests for the MindWords round engine."""

import random

import pytest

from mindwords.errors import InvalidGuessError, RoundOverError
from mindwords.game_engine import (
    MASK_GLYPH,
    HintStatus,
    Outcome,
    Round,
    RoundState,
    ScoringRules,
    validate_guess,
    validate_letter,
)


def _miss(rnd: Round, times: int) -> None:
    """Make `times` wrong guesses of the right length."""
    wrong = "z" * len(rnd)
    for _ in range(times):
        rnd.guess(wrong)


class TestRoundSetup:
    """Test cases for creating a round."""

    def test_initial_state(self):
        """A new round starts active with full score and nothing revealed."""
        rnd = Round("hello")

        assert rnd.answer == "hello"
        assert rnd.score == 100
        assert rnd.tries == 0
        assert rnd.max_tries == 10
        assert rnd.revealed_positions == frozenset()
        assert rnd.hint_used is False
        assert rnd.state == RoundState.ACTIVE
        assert not rnd.is_terminal
        assert len(rnd) == 5

    def test_answer_is_normalized(self):
        """Answers are trimmed and lowercased."""
        assert Round("  HeLLo ").answer == "hello"

    @pytest.mark.parametrize("answer", ["", "   ", "he llo", "hell0", None])
    def test_invalid_answer_rejected(self, answer):
        """Answers must be non-empty and alphabetic."""
        with pytest.raises(ValueError):
            Round(answer)

    def test_invalid_max_tries_rejected(self):
        with pytest.raises(ValueError):
            Round("hello", max_tries=0)

    def test_custom_rules(self):
        """Rules can be overridden, e.g. from configuration."""
        rules = ScoringRules(start_score=50, clue_penalty=7, max_tries=3)
        rnd = Round("hello", rules=rules)

        assert rnd.score == 50
        assert rnd.max_tries == 3
        assert rnd.length_clue().score == 43

    def test_rules_from_dict_ignores_unknown_keys(self):
        rules = ScoringRules.from_dict({"clue_penalty": "7", "bonus": 3})
        assert rules.clue_penalty == 7
        assert rules.start_score == 100

    def test_rules_from_empty_dict(self):
        assert ScoringRules.from_dict(None) == ScoringRules()

    @pytest.mark.parametrize("data", [
        {"start_score": 150},
        {"start_score": 0},
        {"clue_penalty": -5},
        {"wrong_guess_penalty": 0},
        {"max_tries": 0},
        {"hint_unlock_tries": -1},
    ])
    def test_rules_out_of_range_rejected(self, data):
        """Rules that could push the score outside 0..100 are refused."""
        with pytest.raises(ValueError):
            ScoringRules.from_dict(data)


class TestGuess:
    """Test cases for full-word guesses."""

    def setup_method(self):
        """Setup for each test."""
        self.rnd = Round("hello")

    def test_correct_guess_wins(self):
        """An exact guess wins, reveals everything and keeps the score."""
        result = self.rnd.guess("hello")

        assert result.outcome == Outcome.WIN
        assert result.is_terminal
        assert result.score == 100
        assert result.tries == 0
        assert self.rnd.state == RoundState.WON
        assert self.rnd.is_fully_revealed
        assert self.rnd.mask() == "hello"

    def test_correct_guess_is_case_insensitive(self):
        assert self.rnd.guess("HeLLo").outcome == Outcome.WIN

    def test_guess_is_trimmed(self):
        assert self.rnd.guess("  hello ").outcome == Outcome.WIN

    def test_wrong_guess_costs_try_and_points(self):
        """A wrong guess uses one try and costs 10 points."""
        result = self.rnd.guess("world")

        assert result.outcome == Outcome.CONTINUE
        assert not result.is_terminal
        assert result.score == 90
        assert result.tries == 1
        assert result.answer is None
        assert self.rnd.state == RoundState.ACTIVE

    def test_ten_wrong_guesses_run_out_of_tries(self):
        """The 10th wrong guess ends the round and reveals the answer."""
        for _ in range(9):
            assert self.rnd.guess("world").outcome == Outcome.CONTINUE

        result = self.rnd.guess("world")

        assert result.outcome == Outcome.OUT_OF_TRIES
        assert result.answer == "hello"
        assert result.score == 0
        assert result.tries == 10
        assert self.rnd.state == RoundState.LOST_OUT_OF_TRIES

    def test_win_after_misses_keeps_reduced_score(self):
        _miss(self.rnd, 3)
        result = self.rnd.guess("hello")

        assert result.outcome == Outcome.WIN
        assert result.score == 70
        assert result.tries == 3

    @pytest.mark.parametrize("bad", ["", "   ", "hell", "helloo", "he1lo", "he-lo"])
    def test_malformed_guess_rejected_without_state_change(self, bad):
        """Malformed guesses raise and leave the round untouched."""
        with pytest.raises(InvalidGuessError):
            self.rnd.guess(bad)

        assert self.rnd.tries == 0
        assert self.rnd.score == 100

    def test_invalid_guess_error_is_value_error(self):
        with pytest.raises(ValueError):
            self.rnd.guess("hi")

    def test_guess_after_win_raises(self):
        self.rnd.guess("hello")
        with pytest.raises(RoundOverError):
            self.rnd.guess("hello")

    def test_actions_after_loss_raise(self):
        """Every mutation of a finished round is refused."""
        _miss(self.rnd, 10)

        with pytest.raises(RoundOverError):
            self.rnd.guess("world")
        with pytest.raises(RoundOverError):
            self.rnd.letter_count("l")
        with pytest.raises(RoundOverError):
            self.rnd.length_clue()
        with pytest.raises(RoundOverError):
            self.rnd.hint_letter()


class TestClues:
    """Test cases for letter-count and length clues."""

    def setup_method(self):
        """Setup for each test."""
        self.rnd = Round("hello")

    def test_letter_count_reveals_positions(self):
        """Counting 'l' in hello finds 2, reveals positions 2 and 3, costs 5."""
        result = self.rnd.letter_count("l")

        assert result.letter == "l"
        assert result.count == 2
        assert result.positions == [2, 3]
        assert result.score == 95
        assert self.rnd.revealed_positions == frozenset({2, 3})
        assert self.rnd.tries == 0
        assert result.message == "There are 2 'L'."

    def test_letter_count_is_case_insensitive(self):
        result = self.rnd.letter_count("H")
        assert result.count == 1
        assert result.message == "There is 1 'H'."

    def test_absent_letter_still_costs(self):
        result = self.rnd.letter_count("z")

        assert result.count == 0
        assert result.positions == []
        assert result.score == 95
        assert result.message == "No 'Z' here."

    def test_repeated_letter_count_charges_again(self):
        self.rnd.letter_count("l")
        result = self.rnd.letter_count("l")

        assert result.score == 90
        assert self.rnd.revealed_positions == frozenset({2, 3})

    @pytest.mark.parametrize("bad", ["", "ab", "1", "?"])
    def test_invalid_letter_rejected(self, bad):
        with pytest.raises(InvalidGuessError):
            self.rnd.letter_count(bad)
        assert self.rnd.score == 100

    def test_length_clue_twice_costs_ten(self):
        """Each length clue costs 5 and no tries."""
        first = self.rnd.length_clue()
        second = self.rnd.length_clue()

        assert first.length == 5
        assert first.score == 95
        assert second.score == 90
        assert self.rnd.tries == 0
        assert first.message == "It has 5 letters."

    def test_score_never_negative(self):
        """Clues keep charging but the score floors at 0."""
        for _ in range(25):
            self.rnd.length_clue()

        assert self.rnd.score == 0
        assert self.rnd.state == RoundState.ACTIVE


class TestHint:
    """Test cases for the one-time hint."""

    def setup_method(self):
        """Setup for each test."""
        self.rnd = Round("hello", rng=random.Random(7))

    def test_hint_locked_before_five_tries(self):
        """Hints are a no-op before 5 wrong guesses."""
        _miss(self.rnd, 4)
        result = self.rnd.hint_letter()

        assert result.status == HintStatus.LOCKED
        assert not result.granted
        assert result.score == 60
        assert self.rnd.hint_used is False
        assert self.rnd.revealed_positions == frozenset()
        assert result.message == "Hints unlock after 5 guesses."

    def test_hint_reveals_one_letter(self):
        _miss(self.rnd, 5)
        assert self.rnd.hint_unlocked

        result = self.rnd.hint_letter()

        assert result.status == HintStatus.REVEALED
        assert result.granted
        assert result.score == 45
        assert self.rnd.hint_used is True
        assert self.rnd.revealed_positions == frozenset({result.index})
        assert result.letter == "hello"[result.index]
        assert result.message == f"Revealed: position {result.index + 1} is '{result.letter.upper()}'."

    def test_second_hint_is_noop(self):
        """Only one hint per round."""
        _miss(self.rnd, 5)
        self.rnd.hint_letter()
        revealed = self.rnd.revealed_positions

        result = self.rnd.hint_letter()

        assert result.status == HintStatus.ALREADY_USED
        assert result.score == 45
        assert self.rnd.revealed_positions == revealed
        assert result.message == "Hint already used."

    def test_hint_picks_only_hidden_positions(self):
        """With everything but 'o' revealed, the hint must reveal index 4."""
        for letter in "hel":
            self.rnd.letter_count(letter)
        _miss(self.rnd, 5)

        result = self.rnd.hint_letter()

        assert result.index == 4
        assert result.letter == "o"
        assert self.rnd.is_fully_revealed

    def test_hint_with_nothing_left(self):
        """A fully revealed word cannot be hinted and nothing is charged."""
        for letter in "helo":
            self.rnd.letter_count(letter)
        _miss(self.rnd, 5)
        score = self.rnd.score

        result = self.rnd.hint_letter()

        assert result.status == HintStatus.NOTHING_LEFT
        assert result.score == score
        assert self.rnd.hint_used is False
        assert result.message == "Everything's already revealed."

    def test_hint_uses_injected_rng(self):
        """The same seed picks the same position."""
        a = Round("mountain", rng=random.Random(3))
        b = Round("mountain", rng=random.Random(3))
        _miss(a, 5)
        _miss(b, 5)

        assert a.hint_letter().index == b.hint_letter().index


class TestMaskAndSerialization:
    """Test cases for masking and to_dict/from_dict."""

    def test_mask_hides_unrevealed(self):
        rnd = Round("hello")
        assert rnd.mask() == MASK_GLYPH * 5

        rnd.letter_count("l")
        assert rnd.mask() == f"{MASK_GLYPH}{MASK_GLYPH}ll{MASK_GLYPH}"
        assert rnd.mask("_") == "__ll_"

    def test_mask_is_pure(self):
        rnd = Round("hello")
        rnd.mask()
        assert rnd.score == 100
        assert rnd.revealed_positions == frozenset()

    def test_to_dict_without_answer(self):
        rnd = Round("hello")
        rnd.letter_count("e")
        data = rnd.to_dict(include_answer=False)

        assert "answer" not in data
        assert data["mask"] == f"{MASK_GLYPH}e{MASK_GLYPH * 3}"
        assert data["revealed"] == [1]
        assert data["score"] == 95
        assert data["state"] == "active"

    def test_from_dict_restores_round(self):
        rnd = Round("hello")
        rnd.letter_count("l")
        _miss(rnd, 2)

        restored = Round.from_dict(rnd.to_dict())

        assert restored.answer == "hello"
        assert restored.score == rnd.score
        assert restored.tries == 2
        assert restored.revealed_positions == rnd.revealed_positions
        assert restored.state == RoundState.ACTIVE

    def test_from_dict_requires_answer(self):
        with pytest.raises(ValueError):
            Round.from_dict(Round("hello").to_dict(include_answer=False))

    @pytest.mark.parametrize("field,value", [("score", 150), ("score", -1), ("tries", 11), ("revealed", [5])])
    def test_from_dict_rejects_out_of_range(self, field, value):
        data = Round("hello").to_dict()
        data[field] = value
        with pytest.raises(ValueError):
            Round.from_dict(data)


class TestValidation:
    """Test cases for the shared input checks."""

    def test_validate_guess_returns_trimmed(self):
        assert validate_guess("  Hello ", 5) == "Hello"

    def test_validate_guess_messages(self):
        with pytest.raises(InvalidGuessError, match="Type your guess"):
            validate_guess("  ", 5)
        with pytest.raises(InvalidGuessError, match="letters only"):
            validate_guess("he11o", 5)
        with pytest.raises(InvalidGuessError, match="must be 5 letters"):
            validate_guess("hell", 5)

    def test_validate_letter(self):
        assert validate_letter(" Q ") == "q"
        with pytest.raises(InvalidGuessError):
            validate_letter("qq")


class TestRoundProperties:
    """Random action sequences keep score and tries within bounds."""

    @pytest.mark.parametrize("seed", range(10))
    def test_random_actions_respect_bounds(self, seed):
        rng = random.Random(seed)
        rnd = Round("puzzle", rng=random.Random(seed))
        previous_tries = 0

        for _ in range(60):
            if rnd.is_terminal:
                break
            action = rng.choice(["guess", "letter", "length", "hint"])
            tries_before = rnd.tries
            if action == "guess":
                rnd.guess(rng.choice(["puzzle", "zzzzzz", "muzzle", "puddle"]))
            elif action == "letter":
                rnd.letter_count(rng.choice("abcdelpuz"))
                assert rnd.tries == tries_before
            elif action == "length":
                rnd.length_clue()
                assert rnd.tries == tries_before
            else:
                rnd.hint_letter()
                assert rnd.tries == tries_before

            assert 0 <= rnd.score <= 100
            assert previous_tries <= rnd.tries <= rnd.max_tries
            assert len(rnd.mask()) == 6
            previous_tries = rnd.tries
