"""MindWords: a single-player word-guessing game.

Each round hides a random word behind a mask:
- Start at 100 points, never below 0
- Wrong full-word guess: -10 and one of 10 tries
- Letter count or length clue: -5, no try used
- One hint after 5 wrong guesses: reveals a hidden letter (-5) plus a tip
- Solving adds the round score to the session total and raises the level
"""

from mindwords.game import MindWordsGame
from mindwords.game_engine import Round, ScoringRules

__version__ = "0.1.0"

__all__ = ["MindWordsGame", "Round", "ScoringRules"]
