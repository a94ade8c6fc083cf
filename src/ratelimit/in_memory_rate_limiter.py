"""Rate limiter that keeps counters in process memory."""

import threading
import time
from typing import Callable

from models.config import RateLimitPolicy
from ratelimit.rate_limiter import RateLimiter


class InMemoryRateLimiter(RateLimiter):
    """Rate limiter with counters stored in process memory.

    Counters are not shared between workers, so this limiter is suitable for
    single worker deployments only. Only the current window of each subject
    is remembered, counters from older windows are pruned when a new window
    starts.
    """

    def __init__(
        self,
        name: str,
        policy: RateLimitPolicy,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize rate limiter with empty counters."""
        super().__init__(name, policy, clock)
        self._counters: dict[str, tuple[int, int]] = {}
        self._latest_window = 0
        self._lock = threading.Lock()

    def _prune(self, window_start: int) -> None:
        """Drop counters of windows older than the given one."""
        if window_start <= self._latest_window:
            return
        self._latest_window = window_start
        self._counters = {
            subject: counter
            for subject, counter in self._counters.items()
            if counter[0] >= window_start
        }

    def _increment(self, subject: str, window_start: int) -> int:
        with self._lock:
            self._prune(window_start)
            start, count = self._counters.get(subject, (window_start, 0))
            if start != window_start:
                count = 0
            count += 1
            self._counters[subject] = (window_start, count)
            return count

    def _count(self, subject: str, window_start: int) -> int:
        with self._lock:
            start, count = self._counters.get(subject, (window_start, 0))
            return count if start == window_start else 0

    def reset(self, subject: str) -> None:
        """Forget all requests of given subject."""
        with self._lock:
            self._counters.pop(subject, None)

    def __len__(self) -> int:
        """Return number of tracked subjects."""
        return len(self._counters)
