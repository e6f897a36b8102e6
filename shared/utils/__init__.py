"""Shared utility modules.

- retry: Exponential backoff with HTTP 429 Retry-After support
- timing: Timer context manager for measuring operations
- logging: JSON-formatted logging utilities
"""

from .retry import retry_with_backoff
from .timing import Timer
from .logging import JSONFormatter, setup_logger, setup_logging, log_round_summary

__all__ = [
    "retry_with_backoff",
    "Timer",
    "JSONFormatter",
    "setup_logger",
    "setup_logging",
    "log_round_summary",
]
