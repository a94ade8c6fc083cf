"""Abstract class that is the parent for all response cache backends.

Backends store opaque string values under string keys, each value with its
own time-to-live. Entries must never be returned after their TTL elapsed.
Key derivation and (de)serialization of AI responses is done by
`cache.response_cache.ResponseCache`, which wraps a backend.
"""

from abc import ABC, abstractmethod
from typing import Optional


class Cache(ABC):
    """Abstract class that is the parent for all cache backends."""

    @abstractmethod
    def connect(self) -> None:
        """Initialize connection to storage."""

    @abstractmethod
    def connected(self) -> bool:
        """Check if connection to storage is alive."""

    @abstractmethod
    def initialize_cache(self) -> None:
        """Initialize cache storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get the value associated with the given key.

        Args:
            key: Cache key.

        Returns:
            The stored value, or None when not found or expired.
        """

    @abstractmethod
    def set(self, key: str, value: str, ttl: int) -> None:
        """Set the value associated with the given key.

        Args:
            key: Cache key.
            value: Value to store, existing value is overwritten.
            ttl: Time-to-live in seconds.
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete value associated with the given key.

        Returns:
            True when an entry has been deleted.
        """

    @abstractmethod
    def clear(self, prefix: str) -> int:
        """Delete all entries whose key starts with given prefix.

        Returns:
            Number of deleted entries.
        """

    @abstractmethod
    def ready(self) -> bool:
        """Check if the cache is ready."""
