"""
Retry policy for vendor HTTP requests.

Exponential backoff with bounded jitter. The policy only computes delays
and answers "is this status retryable"; the request loop that applies it
lives in ``voicelink_core.transport.http``.
"""

import random
from typing import Callable, List

from pydantic import BaseModel, Field


# Called as observer(attempt, delay_seconds) right before each backoff sleep.
RetryObserver = Callable[[int, float], None]

DEFAULT_RETRYABLE_STATUSES = [429, 500, 502, 503, 504]


class RetryPolicy(BaseModel):
    """Retry policy configuration"""

    max_retries: int = Field(default=3, ge=0)
    base_delay_seconds: float = Field(default=0.2, gt=0)
    max_delay_seconds: float = Field(default=5.0, gt=0)
    multiplier: float = Field(default=2.0, ge=1.0)
    jitter: float = Field(default=0.1, ge=0, lt=1 / 3)

    retryable_status_codes: List[int] = Field(
        default_factory=lambda: list(DEFAULT_RETRYABLE_STATUSES)
    )

    @property
    def max_attempts(self) -> int:
        """Total attempts including the first one."""
        return self.max_retries + 1

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in self.retryable_status_codes

    def get_delay(self, attempt: int) -> float:
        """
        Calculate the wait before retry number ``attempt`` (1-based).

        With a multiplier of 2 and jitter below one third, consecutive
        delays are strictly increasing until they reach ``max_delay_seconds``.
        """
        delay = self.base_delay_seconds * (self.multiplier ** (attempt - 1))

        jitter_range = delay * self.jitter
        delay += random.uniform(-jitter_range, jitter_range)

        return min(delay, self.max_delay_seconds)
