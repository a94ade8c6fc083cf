"""Orchestrator routing AI requests to one of configured providers.

The orchestrator is the single entry point used by the rest of the service.
For every request it:

1. consults the response cache and returns the cached response on hit
1. selects the first credentialed provider in priority order
1. invokes the provider adapter under an operation-class timeout
1. records metrics, caches the response and returns it

Failures raised by the provider are mapped into the error taxonomy from
`ai.errors`, counted and re-raised. A failed call is never retried and
never routed to another provider.
"""

import asyncio
import json
import time
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

import constants
from ai.errors import ConfigurationError, map_provider_error
from ai.providers.base import BaseProvider
from ai.providers.gemini_provider import GeminiProvider
from ai.providers.openai_provider import OpenAIProvider
from cache.response_cache import ResponseCache
from log import get_logger
from metrics.sink import CACHE_HIT, CACHE_MISS, MetricsSink
from models.config import Configuration
from models.requests import AIRequest, OperationClass
from models.responses import AIResponse, PerformanceMetrics, ProviderStatus

logger = get_logger(__name__)

PROVIDER_CLASSES: dict[str, type[BaseProvider]] = {
    constants.PROVIDER_OPENAI: OpenAIProvider,
    constants.PROVIDER_GEMINI: GeminiProvider,
}


def select_provider(credentials: dict[str, bool], priority: Iterable[str]) -> str:
    """Select the first credentialed provider in priority order.

    Raises:
        ConfigurationError: when no provider has a credential configured.
    """
    for name in priority:
        if credentials.get(name, False):
            return name
    raise ConfigurationError(constants.NO_PROVIDERS_CONFIGURED_MESSAGE)


def _decode_content(content: str) -> object:
    """Decode JSON content, content that is not valid JSON is kept as text."""
    try:
        return json.loads(content)
    except ValueError:
        logger.warning("Provider returned invalid JSON, returning raw text")
        return content


class AIOrchestrator:
    """Facade routing normalized AI requests to provider adapters."""

    def __init__(
        self,
        config: Configuration,
        cache: ResponseCache,
        metrics: MetricsSink,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Initialize orchestrator with its collaborators."""
        self._config = config
        self._cache = cache
        self._metrics = metrics
        self._clock = clock
        self._adapters: dict[str, tuple[str, BaseProvider]] = {}

    def _elapsed_ms(self, started: float) -> float:
        return max(0.0, (self._clock() - started) * 1000.0)

    def _timeout_for(self, operation: OperationClass) -> float:
        """Return timeout in seconds for given operation class."""
        if operation == OperationClass.MULTIMODAL:
            return self._config.timeouts.multimodal
        return self._config.timeouts.text

    def _adapter(self, provider: str) -> BaseProvider:
        """Return adapter for provider, reusing one built for same credential."""
        provider_config = self._config.providers.get(provider)
        api_key = provider_config.resolve_api_key()
        if api_key is None:
            # credential disappeared between selection and the call
            raise ConfigurationError(constants.NO_PROVIDERS_CONFIGURED_MESSAGE)
        cached = self._adapters.get(provider)
        if cached is not None and cached[0] == api_key:
            return cached[1]
        adapter = PROVIDER_CLASSES[provider](
            api_key,
            base_url=provider_config.base_url,
            default_model=provider_config.default_model,
        )
        self._adapters[provider] = (api_key, adapter)
        return adapter

    def get_provider_status(self) -> ProviderStatus:
        """Report which providers have credentials configured right now."""
        return ProviderStatus(
            providers=self._config.providers.credentials(),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    async def execute(
        self, request: AIRequest, operation: OperationClass = OperationClass.TEXT
    ) -> AIResponse:
        """Execute AI request using cache or the preferred provider.

        Args:
            request: Normalized and validated request.
            operation: Operation class selecting the timeout to use.

        Returns:
            Response produced by provider or retrieved from cache.

        Raises:
            ConfigurationError: when no provider is configured.
            ProviderError: when the provider call failed.
            InternalError: on unexpected failure during the call.
        """
        started = self._clock()
        cached = self._cache.get(request)
        if cached is not None:
            self._metrics.increment_request(cached.provider, request.model, CACHE_HIT)
            logger.debug("Serving response from cache (provider %s)", cached.provider)
            return cached.model_copy(update={"latency": self._elapsed_ms(started)})

        provider = select_provider(
            self._config.providers.credentials(), self._config.provider_priority
        )
        self._metrics.increment_request(provider, request.model, CACHE_MISS)

        timeout = self._timeout_for(operation)
        logger.info(
            "Sending %s request to %s (model %s)", operation.value, provider, request.model
        )
        call_started = self._clock()
        try:
            adapter = self._adapter(provider)
            with self._metrics.track_in_flight():
                content = await asyncio.wait_for(
                    adapter.invoke(request, timeout), timeout=timeout
                )
        except Exception as e:
            error = map_provider_error(e, provider)
            self._metrics.increment_error(provider, request.model, error.code)
            logger.error("Request to %s failed: %s", provider, error)
            if error is e:
                raise
            raise error from e

        latency = self._elapsed_ms(call_started)
        self._metrics.record_latency(provider, request.model, latency)

        response = AIResponse(
            content=_decode_content(content) if request.wants_json else content,
            provider=provider,
            latency=latency,
        )
        self._cache.set(request, response)
        logger.info("Request served by %s in %.1f ms", provider, latency)
        return response

    def clear_cache(self, key: Optional[str] = None) -> None:
        """Clear one cache entry or the whole AI response cache."""
        self._cache.clear(key)

    def get_performance_metrics(self) -> PerformanceMetrics:
        """Summarize performance of provider calls."""
        return self._metrics.get_performance_metrics()
