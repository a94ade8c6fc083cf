"""Model for response cache entry."""

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """Model representing a cache entry stored by cache backends.

    Attributes:
        key: Cache key derived from the request
        value: Serialized AI response
        expires_at: Time (seconds since epoch) when the entry expires
    """

    key: str
    value: str
    expires_at: float

    def expired(self, now: float) -> bool:
        """Check if entry is expired at given time."""
        return now >= self.expires_at
