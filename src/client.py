"""AI orchestrator retrieval."""

from typing import Optional

import constants
from ai.orchestrator import AIOrchestrator
from cache.cache import Cache
from cache.cache_factory import CacheFactory
from cache.noop_cache import NoopCache
from cache.response_cache import ResponseCache
from log import get_logger
from metrics.sink import MetricsSink
from models.config import Configuration
from ratelimit.rate_limiter import RateLimiter
from ratelimit.rate_limiter_factory import RateLimiterFactory
from utils.types import Singleton

logger = get_logger(__name__)

NOT_INITIALISED = (
    "AIOrchestrator has not been initialised. Ensure 'load(..)' has been called."
)


class AIOrchestratorHolder(metaclass=Singleton):
    """Container for an initialised AIOrchestrator and its collaborators."""

    _orchestrator: Optional[AIOrchestrator] = None
    _metrics: Optional[MetricsSink] = None
    _rate_limiters: dict[str, RateLimiter] = {}

    def load(self, config: Configuration) -> None:
        """Build AI orchestrator, metrics sink and rate limiters from configuration."""
        logger.info("Initializing AI orchestrator")
        backend = self._response_cache_backend(config)
        cache = ResponseCache(backend, config.response_cache.ttl)
        self._metrics = MetricsSink(provider_status=config.providers.credentials)
        self._orchestrator = AIOrchestrator(config, cache, self._metrics)
        self._rate_limiters = {
            policy: RateLimiterFactory.rate_limiter(policy, config.rate_limits)
            for policy in (
                constants.RATE_LIMIT_POLICY_DEFAULT,
                constants.RATE_LIMIT_POLICY_EXPENSIVE,
            )
        }

    @staticmethod
    def _response_cache_backend(config: Configuration) -> Cache:
        """Build cache backend, falling back to no cache when it is unavailable."""
        try:
            return CacheFactory.response_cache(config.response_cache)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                "Unable to initialize response cache, caching disabled: %s", e
            )
            return NoopCache()

    def get_orchestrator(self) -> AIOrchestrator:
        """Return an initialised AIOrchestrator."""
        if not self._orchestrator:
            raise RuntimeError(NOT_INITIALISED)
        return self._orchestrator

    def get_metrics(self) -> MetricsSink:
        """Return metrics sink used by the orchestrator."""
        if not self._metrics:
            raise RuntimeError(NOT_INITIALISED)
        return self._metrics

    def get_rate_limiter(self, policy: str) -> RateLimiter:
        """Return rate limiter for given policy."""
        if policy not in self._rate_limiters:
            raise RuntimeError(NOT_INITIALISED)
        return self._rate_limiters[policy]
