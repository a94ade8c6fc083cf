"""Content-addressed cache of AI responses.

The cache maps a canonicalized `AIRequest` to the `AIResponse` computed for
it. Keys have the form `ai:<hash>` where hash is a 32-bit rolling hash of the
canonical JSON form of the request, written as 8 hexadecimal digits.

Please note that the hash is not cryptographic: two semantically different
requests can share one key, in which case the second one is answered with
the response computed for the first one. This is an accepted tradeoff. A
cryptographic hash can be used in `make_key` without changing the interface.

The cache is an optimization, not a dependency: every operation catches
errors raised by the backend, logs them and behaves as a miss (for `get`) or
a no-op (for `set` and `clear`).
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

import constants
from cache.cache import Cache
from log import get_logger
from models.requests import AIRequest
from models.responses import AIResponse

logger = get_logger("cache.response_cache")

_HASH_MODULUS = 2**32


def rolling_hash(text: str) -> int:
    """Compute 32-bit rolling hash of given text."""
    value = 0
    for ch in text:
        value = (value * 31 + ord(ch)) % _HASH_MODULUS
    return value


def make_key(request: AIRequest) -> str:
    """Derive cache key from the request, the same request gives the same key."""
    return f"{constants.CACHE_KEY_PREFIX}{rolling_hash(request.canonical_json()):08x}"


class ResponseCache:
    """Cache of AI responses backed by one of `Cache` implementations."""

    def __init__(
        self, backend: Cache, default_ttl: int = constants.DEFAULT_CACHE_TTL
    ) -> None:
        """Initialize response cache with given backend."""
        self.backend = backend
        self.default_ttl = default_ttl

    def get(self, request: AIRequest) -> Optional[AIResponse]:
        """Retrieve response stored for the request.

        Returns:
            Stored response, or None on miss or when cache is unavailable.
        """
        key = make_key(request)
        try:
            value = self.backend.get(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unable to read from response cache: %s", e)
            return None
        if value is None:
            logger.debug("Cache miss for key %s", key)
            return None
        try:
            return AIResponse.model_validate_json(value)
        except PydanticValidationError as e:
            logger.warning("Corrupted cache entry %s, ignoring it: %s", key, e)
            return None

    def set(
        self,
        request: AIRequest,
        response: AIResponse,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        """Store response for the request, overwriting any previous one."""
        key = make_key(request)
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        try:
            self.backend.set(key, response.model_dump_json(), ttl)
            logger.debug("Cached response under key %s for %d seconds", key, ttl)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unable to write into response cache: %s", e)

    def clear(self, key: Optional[str] = None) -> None:
        """Clear one entry, or all AI entries when no key is given."""
        try:
            if key is not None:
                self.backend.delete(key)
                logger.info("Cache entry %s cleared", key)
            else:
                deleted = self.backend.clear(constants.CACHE_KEY_PREFIX)
                logger.info("AI cache cleared, %d entries removed", deleted)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unable to clear response cache: %s", e)
