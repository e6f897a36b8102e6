#!/usr/bin/env python3
"""Demo of a MindWords round played by a scripted player."""

import random

from mindwords.config import DEFAULT_WORDS_FILE, GameConfig
from mindwords.errors import InvalidGuessError
from mindwords.game import MindWordsGame
from shared.adapters.words_api import YamlWordSource


# Create a simple demo that doesn't require network access
def demo_scripted_round():
    """Play one offline round with a few clues before guessing."""
    print("🧠 MindWords Demo")
    print("=" * 50)

    # Set seed for reproducible demo
    rng = random.Random(42)
    source = YamlWordSource(DEFAULT_WORDS_FILE, rng=rng)

    with MindWordsGame(source, config=GameConfig(), rng=rng) as game:
        game.start()
        game.wait_for_word()
        rnd = game.round
        print(f"Secret word: {rnd.mask()} (answer for demo purposes: {rnd.answer})")

        print("\nAsking for the length...")
        print(f"  {game.length_clue().message}")

        for letter in "eas":
            print(f"Counting '{letter}'...")
            print(f"  {game.letter_count(letter).message}  ->  {rnd.mask()}")

        print("\nA malformed guess is rejected without a penalty:")
        try:
            game.guess("x1")
        except InvalidGuessError as e:
            print(f"  {e}")

        wrong = "a" * len(rnd)
        print(f"\nGuessing '{wrong}'...")
        game.guess(wrong)
        print(f"  {game.message} (score {rnd.score}, tries {rnd.tries}/{rnd.max_tries})")

        print(f"\nGuessing '{rnd.answer}'...")
        game.guess(rnd.answer)

        print("\n" + "=" * 50)
        print(f"Total: {game.total}, level: {game.level}")
        print("Demo complete!")


if __name__ == "__main__":
    demo_scripted_round()
