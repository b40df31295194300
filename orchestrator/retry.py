import threading
import time
from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with exponential backoff.

    max_attempts counts the first call, so max_attempts=3 means one call plus
    two retries. deadline_s bounds the wall-clock time of all attempts and
    sleeps together; None means attempts alone bound the loop.
    """

    max_attempts: int = 3
    initial_backoff_s: float = 0.2
    multiplier: float = 2.0
    deadline_s: float | None = None

    def backoff_for(self, attempt_index: int) -> float:
        """Delay to wait after the failed attempt `attempt_index` (0-based)."""
        return self.initial_backoff_s * (self.multiplier**attempt_index)

    def has_attempts_left(self, attempt_index: int) -> bool:
        return attempt_index + 1 < self.max_attempts


class Deadline:
    """Wall-clock budget measured from construction."""

    def __init__(self, seconds: float | None, clock=time.monotonic):
        self._clock = clock
        self._expires_at = None if seconds is None else clock() + seconds

    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0


def interruptible_sleep(seconds: float, cancel_event: threading.Event | None = None) -> bool:
    """
    Sleep for `seconds` unless `cancel_event` is set first.

    Returns:
        True if the full delay elapsed, False if the sleep was interrupted
    """
    if seconds <= 0:
        return not (cancel_event is not None and cancel_event.is_set())
    event = cancel_event or threading.Event()
    return not event.wait(seconds)
