"""Metrics sink recording requests, errors and latencies of AI calls."""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterable, Iterator, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from prometheus_client.core import GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from log import get_logger
from models.responses import PerformanceMetrics

logger = get_logger(__name__)

# latency buckets in milliseconds, provider calls take from ~200ms (text) to
# tens of seconds (image analysis)
LATENCY_BUCKETS = (
    50.0,
    100.0,
    250.0,
    500.0,
    1000.0,
    2500.0,
    5000.0,
    10000.0,
    30000.0,
    60000.0,
)

CACHE_HIT = "hit"
CACHE_MISS = "miss"


class ProviderStatusCollector(Collector):
    """Collector reporting provider configured/not-configured status.

    The status is recomputed by calling the callback every time metrics are
    scraped, it is never cached.
    """

    def __init__(self, provider_status: Callable[[], dict[str, bool]]) -> None:
        """Initialize collector with callback returning provider status."""
        self._provider_status = provider_status

    def collect(self) -> Iterable[Metric]:
        """Yield gauge with one sample per known provider."""
        gauge = GaugeMetricFamily(
            "ai_provider_configured",
            "AI provider has credential configured (1) or not (0)",
            labels=["provider"],
        )
        try:
            for provider, configured in self._provider_status().items():
                gauge.add_metric([provider], 1.0 if configured else 0.0)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unable to retrieve provider status: %s", e)
        yield gauge


class MetricsSink:
    """Process-wide metrics of the orchestration layer.

    Recording never blocks nor fails the request path: every recording
    method catches and logs its own errors.
    """

    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        provider_status: Optional[Callable[[], dict[str, bool]]] = None,
    ) -> None:
        """Create all instruments in given (or new) registry."""
        self._provider_status = provider_status
        self._create_instruments(registry or CollectorRegistry())

    # pylint: disable=W0201
    def _create_instruments(self, registry: CollectorRegistry) -> None:
        """Create instruments and register them into registry."""
        self.registry = registry

        # Metric that counts AI requests served for each provider + model,
        # requests served from cache are labeled by cache="hit"
        self.requests_total = Counter(
            "ai_requests_total",
            "AI requests counter",
            ["provider", "model", "cache"],
            registry=registry,
        )

        # Metric that counts failed AI requests by mapped error code
        self.errors_total = Counter(
            "ai_errors_total",
            "AI request errors counter",
            ["provider", "model", "error_code"],
            registry=registry,
        )

        # Histogram to measure provider call durations
        self.latency_milliseconds = Histogram(
            "ai_request_latency_milliseconds",
            "AI provider call latency in milliseconds",
            ["provider", "model"],
            buckets=LATENCY_BUCKETS,
            registry=registry,
        )

        # Metric with number of provider calls being processed right now
        self.requests_in_flight = Gauge(
            "ai_requests_in_flight",
            "AI provider calls in progress",
            registry=registry,
        )

        if self._provider_status is not None:
            registry.register(ProviderStatusCollector(self._provider_status))

    def reset(self) -> None:
        """Drop all recorded values by re-creating registry and instruments."""
        self._create_instruments(CollectorRegistry())

    def increment_request(self, provider: str, model: str, cache: str = CACHE_MISS) -> None:
        """Count one served request."""
        try:
            self.requests_total.labels(provider, model, cache).inc()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unable to record request metric: %s", e)

    def increment_error(self, provider: str, model: str, error_code: str) -> None:
        """Count one failed request."""
        try:
            self.errors_total.labels(provider, model, error_code).inc()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unable to record error metric: %s", e)

    def record_latency(self, provider: str, model: str, latency: float) -> None:
        """Record provider call latency in milliseconds."""
        try:
            self.latency_milliseconds.labels(provider, model).observe(latency)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unable to record latency metric: %s", e)

    @contextmanager
    def track_in_flight(self) -> Iterator[None]:
        """Count the wrapped block as an in-flight provider call."""
        try:
            self.requests_in_flight.inc()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unable to record in-flight metric: %s", e)
        try:
            yield
        finally:
            try:
                self.requests_in_flight.dec()
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error("Unable to record in-flight metric: %s", e)

    def exposition(self) -> tuple[bytes, str]:
        """Return metrics in Prometheus text format together with content type."""
        return generate_latest(self.registry), CONTENT_TYPE_LATEST

    @staticmethod
    def _sum_samples(instrument: Counter | Histogram, sample_name: str) -> float:
        """Sum values of all samples with given name across all label values."""
        total = 0.0
        for metric in instrument.collect():
            for sample in metric.samples:
                if sample.name == sample_name:
                    total += sample.value
        return total

    def get_performance_metrics(self) -> PerformanceMetrics:
        """Summarize average latency and success rate of provider calls."""
        calls = self._sum_samples(
            self.latency_milliseconds, "ai_request_latency_milliseconds_count"
        )
        latency_sum = self._sum_samples(
            self.latency_milliseconds, "ai_request_latency_milliseconds_sum"
        )
        errors = self._sum_samples(self.errors_total, "ai_errors_total")
        attempts = calls + errors
        return PerformanceMetrics(
            average_latency=latency_sum / calls if calls else 0.0,
            success_rate=calls / attempts if attempts else 1.0,
            last_updated=datetime.now(timezone.utc).isoformat(),
        )
