"""Timer context manager for measuring operations."""

import time
from typing import Optional


class Timer:
    """Measure wall time with time.monotonic().

    Usable as a context manager or started and read manually:

        with Timer() as t:
            do_work()
        print(t.elapsed_ms)
    """

    def __init__(self):
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def start(self) -> "Timer":
        self.start_time = time.monotonic()
        self.end_time = None
        return self

    def stop(self) -> float:
        if self.start_time is None:
            raise RuntimeError("Timer was never started")
        self.end_time = time.monotonic()
        return self.elapsed

    @property
    def running(self) -> bool:
        return self.start_time is not None and self.end_time is None

    @property
    def elapsed(self) -> float:
        """Elapsed seconds; keeps counting while the timer runs."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.monotonic()
        return end - self.start_time

    @property
    def elapsed_seconds(self) -> int:
        return int(self.elapsed)

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
