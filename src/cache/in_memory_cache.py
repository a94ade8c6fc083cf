"""In-memory cache implementation."""

import threading
import time
from typing import Callable, Optional

from cache.cache import Cache
from models.cache_entry import CacheEntry
from models.config import InMemoryCacheConfig
from log import get_logger

logger = get_logger("cache.in_memory_cache")


class InMemoryCache(Cache):
    """In-memory cache implementation.

    Entries are kept in a dictionary guarded by a lock, so the cache can be
    shared by concurrent requests. When the cache is full the entry that
    expires soonest is evicted.
    """

    def __init__(
        self, config: InMemoryCacheConfig, clock: Callable[[], float] = time.time
    ) -> None:
        """Create a new instance of in-memory cache."""
        self.cache_config = config
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def connect(self) -> None:
        """Initialize connection to storage."""
        logger.info("Connecting to storage")

    def connected(self) -> bool:
        """Check if connection to cache is alive."""
        return True

    def initialize_cache(self) -> None:
        """Initialize cache."""
        with self._lock:
            self._entries.clear()

    def get(self, key: str) -> Optional[str]:
        """Get the value associated with the given key.

        Args:
            key: Cache key.

        Returns:
            The value associated with the key, or None if not found or expired.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: str, ttl: int) -> None:
        """Set the value associated with the given key.

        Args:
            key: Cache key.
            value: Value to store.
            ttl: Time-to-live in seconds.
        """
        now = self._clock()
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.capacity:
                self._evict(now)
            self._entries[key] = CacheEntry(key=key, value=value, expires_at=now + ttl)

    def _evict(self, now: float) -> None:
        """Drop expired entries, or the entry that expires soonest."""
        expired = [k for k, e in self._entries.items() if e.expired(now)]
        for k in expired:
            del self._entries[k]
        if expired:
            return
        soonest = min(self._entries.values(), key=lambda e: e.expires_at)
        logger.debug("Cache is full, evicting %s", soonest.key)
        del self._entries[soonest.key]

    def delete(self, key: str) -> bool:
        """Delete value associated with the given key."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self, prefix: str) -> int:
        """Delete all entries whose key starts with given prefix."""
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
            for k in keys:
                del self._entries[k]
            return len(keys)

    @property
    def capacity(self) -> int:
        """Maximum number of entries stored in cache."""
        return self.cache_config.max_entries

    def __len__(self) -> int:
        """Return number of stored entries, expired included."""
        return len(self._entries)

    def ready(self) -> bool:
        """Check if the cache is ready.

        Returns:
            True in all cases.
        """
        return True
