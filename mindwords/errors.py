"""Exception types raised by the MindWords game."""


class MindWordsError(Exception):
    """Base class for game errors."""


class InvalidGuessError(MindWordsError, ValueError):
    """Player input broke the guess contract (letters only, right length)."""


class RoundOverError(MindWordsError):
    """A round that already reached a terminal outcome was mutated."""


class NoActiveRoundError(MindWordsError):
    """An action arrived while no round is loaded."""
