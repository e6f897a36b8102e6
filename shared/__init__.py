"""MindWords - Shared infrastructure.

Common utilities and infrastructure used by the game and its CLI:
- controllog: Double-entry accounting SDK for structured logging
- adapters: Random word, tip and Dreamlo leaderboard HTTP adapters
- utils: Common utilities (retry, timing, logging)
"""

__version__ = "0.1.0"
