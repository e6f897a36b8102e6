"""Exponential backoff retry decorator with HTTP 429 Retry-After support."""

import functools
import logging
import random
import time
from typing import Callable, Optional, Tuple, Type

logger = logging.getLogger(__name__)


def _retry_after_seconds(exc: Exception) -> Optional[float]:
    """Read a Retry-After header from an HTTP error, if there is one."""
    response = getattr(exc, "response", None)
    if response is None or getattr(response, "status_code", None) != 429:
        return None
    value = (getattr(response, "headers", None) or {}).get("Retry-After")
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        return None


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    jitter: bool = True,
) -> Callable:
    """Retry a function on the given exceptions with exponential backoff.

    Args:
        max_retries: Retries after the first attempt (0 disables retrying)
        base_delay: Delay before the first retry, doubled each time
        max_delay: Upper bound for a single delay
        exceptions: Exception types that trigger a retry
        jitter: Add up to 10% random jitter to each delay

    The last exception is re-raised once retries are exhausted.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_retries:
                        logger.warning(f"{func.__name__} failed after {attempt + 1} attempts: {e}")
                        raise

                    delay = _retry_after_seconds(e)
                    if delay is None:
                        delay = min(max_delay, base_delay * (2 ** attempt))
                        if jitter:
                            delay += random.uniform(0, delay * 0.1)

                    attempt += 1
                    logger.info(
                        f"{func.__name__} failed ({e}); retry {attempt}/{max_retries} in {delay:.1f}s"
                    )
                    time.sleep(delay)

        return wrapper

    return decorator
