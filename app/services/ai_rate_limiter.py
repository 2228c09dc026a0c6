"""
Outbound rate limiting for Gemini calls.
- CallThrottle: minimum delay between the start of successive calls (process-wide, 2s).
- RetryPolicy: exponential backoff for transient failures (5s, 15s, 45s).
One CallThrottle instance is shared by every caller; tests build their own with a fake clock.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable

from tenacity import stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

MIN_DELAY_BETWEEN_CALLS = 2.0
MAX_RETRIES = 3
BACKOFF_BASE_SECONDS = 5.0
BACKOFF_MULTIPLIER = 3.0


class CallThrottle:
    """
    Token-less throttle based on the last call start.
    Not locked: under heavy concurrency the delay is only approximately honored.
    """

    def __init__(
        self,
        min_interval: float = MIN_DELAY_BETWEEN_CALLS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call_at: float | None = None

    @property
    def last_call_at(self) -> float | None:
        return self._last_call_at

    def wait(self) -> float:
        """Block until a call may start, then record the start. Returns seconds waited."""
        waited = 0.0
        if self._last_call_at is not None:
            elapsed = self._clock() - self._last_call_at
            if elapsed < self.min_interval:
                waited = self.min_interval - elapsed
                logger.debug("Throttling Gemini call for %.2fs", waited)
                self._sleep(waited)
        self._last_call_at = self._clock()
        return waited

    def sleep(self, seconds: float) -> None:
        """Backoff sleeps go through the same clock so tests can observe them."""
        self._sleep(seconds)


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff schedule for transient Gemini failures, expressed as tenacity strategies."""

    max_retries: int = MAX_RETRIES
    base_delay: float = BACKOFF_BASE_SECONDS
    multiplier: float = BACKOFF_MULTIPLIER

    def stop(self) -> stop_after_attempt:
        # initial attempt plus max_retries retries
        return stop_after_attempt(self.max_retries + 1)

    def wait(self) -> wait_exponential:
        """base_delay * multiplier ** (attempt - 1): 5s, 15s, 45s with the defaults."""
        return wait_exponential(multiplier=self.base_delay, exp_base=self.multiplier)
