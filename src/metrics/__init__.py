"""Metrics module for AI orchestration service.

All instruments live in a registry owned by `MetricsSink`, so the sink can be
constructed explicitly, injected into the orchestrator and reset in tests.
"""

from metrics.sink import MetricsSink, ProviderStatusCollector

__all__ = ["MetricsSink", "ProviderStatusCollector"]
