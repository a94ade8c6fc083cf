"""Abstract class that is the parent for all rate limiter implementations.

Each configured policy (`default`, `expensive`) is served by its own rate
limiter instance. The limiter counts requests of one subject (user ID or
client address) in fixed time windows. Window boundaries are aligned to
multiples of the window length, i.e. the window containing time `now` starts
at `floor(now / window) * window`. When the count in the current window
exceeds `max_requests`, the request is rejected with `RateLimitExceeded`.

Fixed windows allow up to two times the ceiling in a short burst around
a window boundary. This is an accepted tradeoff for the simplicity of the
storage (one counter per subject).
"""

import math
import time
from abc import ABC, abstractmethod
from typing import Callable

from ai.errors import RateLimitExceeded
from log import get_logger
from models.config import RateLimitPolicy

logger = get_logger(__name__)


class RateLimiter(ABC):
    """Abstract class that is parent for all rate limiter implementations."""

    def __init__(
        self,
        name: str,
        policy: RateLimitPolicy,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize rate limiter with its policy."""
        self.name = name
        self.window = policy.window
        self.max_requests = policy.max_requests
        self._clock = clock

    def window_start(self, now: float) -> int:
        """Compute start of the window the given time belongs to."""
        return math.floor(now / self.window) * self.window

    @abstractmethod
    def _increment(self, subject: str, window_start: int) -> int:
        """Count one request in the window and return the new count."""

    @abstractmethod
    def _count(self, subject: str, window_start: int) -> int:
        """Return number of requests counted in the window."""

    @abstractmethod
    def reset(self, subject: str) -> None:
        """Forget all requests of given subject."""

    def hit(self, subject: str) -> None:
        """Count one request of subject and reject it when over the limit.

        Raises:
            RateLimitExceeded: when subject already reached the ceiling in the
            current window.
        """
        now = self._clock()
        start = self.window_start(now)
        count = self._increment(subject, start)
        if count > self.max_requests:
            retry_after = max(1, math.ceil(start + self.window - now))
            logger.warning(
                "Rate limit '%s' exceeded by %s (%d requests in window)",
                self.name,
                subject,
                count,
            )
            raise RateLimitExceeded(
                limit=self.max_requests,
                window=self.window,
                subject=subject,
                retry_after=retry_after,
            )

    def remaining(self, subject: str) -> int:
        """Number of requests subject can still make in current window."""
        start = self.window_start(self._clock())
        return max(0, self.max_requests - self._count(subject, start))

    def __str__(self) -> str:
        """Return textual representation of rate limiter instance."""
        name = type(self).__name__
        return f"{name}: {self.name} ({self.max_requests} requests per {self.window}s)"
