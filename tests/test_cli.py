"""Tests for the MindWords command-line interface."""

import time
from unittest.mock import Mock, patch

from typer.testing import CliRunner

from cli import app
from mindwords.cli_mindwords import dispatch
from mindwords.config import GameConfig
from mindwords.game import MindWordsGame
from mindwords.game_engine import ScoringRules
from shared.adapters.dreamlo_adapter import DreamloClient
from shared.adapters.words_api import WordSource
from shared.cli_analytics import summarize_rounds

runner = CliRunner()


class FixedWordSource(WordSource):
    def __init__(self, word="hello"):
        self.word = word

    def fetch_random_word(self, min_len, max_len):
        return self.word


class SlowWordSource(FixedWordSource):
    """Answers the first fetch at once and every later one after a delay."""

    def __init__(self, word="hello", delay=0.5):
        super().__init__(word)
        self.delay = delay
        self.calls = 0

    def fetch_random_word(self, min_len, max_len):
        self.calls += 1
        if self.calls > 1:
            time.sleep(self.delay)
        return self.word


class TestCommands:
    """Test cases for the typer commands."""

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "MindWords" in result.output

    def test_levels_table(self):
        result = runner.invoke(app, ["game", "levels"])
        assert result.exit_code == 0
        assert "4+" in result.output

    def test_offline_word(self):
        result = runner.invoke(app, ["game", "word", "--offline", "--level", "2"])
        assert result.exit_code == 0
        assert "level 2 wants 5-7" in result.output

    def test_missing_config_file(self):
        result = runner.invoke(app, ["game", "levels", "--config", "does/not/exist.yml"])
        assert result.exit_code == 1

    def test_out_of_range_scoring_config(self, tmp_path):
        bad = tmp_path / "bad.yml"
        bad.write_text("scoring:\n  clue_penalty: -5\n")

        result = runner.invoke(app, ["game", "levels", "--config", str(bad)])

        assert result.exit_code == 1
        assert "clue_penalty" in result.output

    def test_board_show_without_code(self):
        with patch.dict("os.environ", {}, clear=True):
            result = runner.invoke(app, ["board", "show"])
        assert result.exit_code == 1
        assert "DREAMLO_PUBLIC_CODE" in result.output

    def test_board_submit_rejects_negative(self):
        result = runner.invoke(app, ["board", "submit", "Ada", "-5", "10"])
        assert result.exit_code != 0

    def test_board_submit(self):
        with patch.object(DreamloClient, "add_score", return_value=True) as mock_add:
            result = runner.invoke(app, ["board", "submit", "  Ada  ", "120", "30"])

        assert result.exit_code == 0
        mock_add.assert_called_once_with("Ada", 120, 30)

    def test_analytics_without_data(self, tmp_path):
        result = runner.invoke(app, ["analytics", "trial-balance", "--log-path", str(tmp_path)])
        assert result.exit_code == 1


class TestDispatch:
    """Test cases for in-game commands."""

    def setup_method(self):
        """Setup for each test."""
        self.game = MindWordsGame(FixedWordSource(), quiet=True)
        self.game.start()
        self.game.wait_for_word(timeout=5)

    def teardown_method(self):
        self.game.close()

    def test_quit(self):
        assert dispatch(self.game, "quit") is False
        assert dispatch(self.game, "  Q ") is False

    def test_blank_line_is_ignored(self):
        assert dispatch(self.game, "   ") is True
        assert self.game.round.score == 100

    def test_letter_count(self):
        assert dispatch(self.game, "?l") is True
        assert self.game.message == "There are 2 'L'."
        assert self.game.round.mask() == "••ll•"

    def test_length_clue(self):
        dispatch(self.game, "#")
        assert self.game.message == "It has 5 letters."

    def test_locked_hint(self):
        dispatch(self.game, "!")
        assert self.game.message == "Hints unlock after 5 guesses."

    def test_invalid_guess_is_reported_not_raised(self):
        assert dispatch(self.game, "hi") is True
        assert self.game.round.tries == 0

    def test_winning_guess_loads_next_word(self):
        dispatch(self.game, "hello")

        assert self.game.total == 100
        assert self.game.round is not None
        assert self.game.generation == 2

    def test_zero_score_guess_waits_for_next_word(self):
        """A wrong guess that empties the score blocks until the new word is in."""
        game = MindWordsGame(
            SlowWordSource(),
            config=GameConfig(scoring=ScoringRules(start_score=10)),
            quiet=True,
        )
        try:
            game.start()
            game.wait_for_word(timeout=5)

            dispatch(game, "zzzzz")

            assert game.round is not None
            assert game.generation == 2
            assert game.message == "Score reached 0. New word…"

            dispatch(game, "hello")
            assert game.total == 10
        finally:
            game.close()

    def test_upload(self):
        board = Mock(spec=DreamloClient)
        board.add_score.return_value = True
        board.last_error = None

        dispatch(self.game, "upload", board, "Ada")

        board.add_score.assert_called_once()
        assert self.game.message == "Leaderboard updated"


class TestRoundSummary:
    """Test cases for the rounds analytics report."""

    def test_summarize_rounds(self):
        events = [
            {"kind": "state_move", "payload_json": {}},
            {"kind": "round_complete", "payload_json": {"outcome": "win", "score": 90, "tries": 1, "hint_used": False}},
            {"kind": "round_complete", "payload_json": {"outcome": "win", "score": 70, "tries": 3, "hint_used": True}},
            {"kind": "round_complete", "payload_json": {"outcome": "out_of_tries", "score": 0, "tries": 10}},
        ]

        summary = summarize_rounds(events)

        assert summary["win"]["rounds"] == 2
        assert summary["win"]["avg_score"] == 80
        assert summary["win"]["avg_tries"] == 2
        assert summary["win"]["hint_rate"] == 0.5
        assert summary["out_of_tries"]["rounds"] == 1
