"""Rate limiter factory class."""

import time
from typing import Callable

from log import get_logger
from models.config import RateLimitsConfiguration
from ratelimit.database_rate_limiter import DatabaseRateLimiter
from ratelimit.in_memory_rate_limiter import InMemoryRateLimiter
from ratelimit.rate_limiter import RateLimiter

logger = get_logger(__name__)


# pylint: disable=too-few-public-methods


class RateLimiterFactory:
    """Rate limiter factory class."""

    @staticmethod
    def rate_limiter(
        policy_name: str,
        config: RateLimitsConfiguration,
        clock: Callable[[], float] = time.time,
    ) -> RateLimiter:
        """Create rate limiter for the named policy based on loaded configuration.

        Returns:
            An instance of `RateLimiter` backed by database when SQLite or
            PostgreSQL storage is configured, in-memory one otherwise.
        """
        policy = config.policy(policy_name)
        limiter: RateLimiter
        if config.sqlite is not None or config.postgres is not None:
            limiter = DatabaseRateLimiter(config, policy_name, policy, clock)
        else:
            limiter = InMemoryRateLimiter(policy_name, policy, clock)
        logger.info("Set up rate limiter: %s", limiter)
        return limiter
