"""No-operation cache used when response caching is disabled."""

from typing import Optional

from cache.cache import Cache
from log import get_logger

logger = get_logger("cache.noop_cache")


class NoopCache(Cache):
    """Cache that stores nothing, every lookup is a miss."""

    def connect(self) -> None:
        """Initialize connection to storage."""
        logger.info("Connecting to storage")

    def connected(self) -> bool:
        """Check if connection to cache is alive."""
        return True

    def initialize_cache(self) -> None:
        """Initialize cache."""

    def get(self, key: str) -> Optional[str]:
        """Get the value associated with the given key.

        Returns:
            None in all cases.
        """
        return None

    def set(self, key: str, value: str, ttl: int) -> None:
        """Set the value associated with the given key, no-op."""

    def delete(self, key: str) -> bool:
        """Delete value associated with the given key.

        Returns:
            True in all cases.
        """
        return True

    def clear(self, prefix: str) -> int:
        """Delete entries with given key prefix.

        Returns:
            Zero in all cases.
        """
        return 0

    def ready(self) -> bool:
        """Check if the cache is ready.

        Returns:
            True in all cases.
        """
        return True
