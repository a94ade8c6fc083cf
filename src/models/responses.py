"""Models for orchestrator and REST API responses."""

from typing import Any

from pydantic import BaseModel, Field


class AIResponse(BaseModel):
    """Normalized result of an AI request.

    Responses served from cache and freshly computed responses have the same
    structure; only the latency differs.

    Attributes:
        content: Text produced by provider, or decoded JSON when structured
            output was requested.
        provider: Name of provider that produced the content.
        latency: End-to-end latency in milliseconds.
    """

    content: Any = Field(
        description="Text or JSON content produced by provider",
        examples=["Hello Jane, thanks for reaching out!"],
    )
    provider: str = Field(
        description="Name of provider that produced the content",
        examples=["openai"],
    )
    latency: float = Field(
        ge=0,
        description="End-to-end latency in milliseconds",
        examples=[734.2],
    )


class ProviderStatus(BaseModel):
    """Snapshot of provider availability.

    Attributes:
        providers: Mapping from provider name to credential presence.
        timestamp: Time when the snapshot was taken (ISO 8601).
    """

    providers: dict[str, bool] = Field(
        description="Provider name mapped to 'is configured' flag",
        examples=[{"openai": True, "gemini": False}],
    )
    timestamp: str = Field(
        description="Time when the snapshot was taken",
        examples=["2025-10-03T09:31:25+00:00"],
    )


class PerformanceMetrics(BaseModel):
    """Summary of orchestrator performance computed from live counters."""

    average_latency: float = Field(
        description="Average latency of provider calls in milliseconds",
        examples=[812.5],
    )
    success_rate: float = Field(
        description="Ratio of successful provider calls",
        examples=[0.98],
    )
    last_updated: str = Field(
        description="Time when the summary was computed",
        examples=["2025-10-03T09:31:25+00:00"],
    )


class CacheClearedResponse(BaseModel):
    """Model representing response to cache clear request."""

    key: str | None = Field(
        None,
        description="Cleared cache key, None when the whole cache has been cleared",
        examples=["ai:1f2e3d4c"],
    )
    success: bool = Field(description="Whether the cache has been cleared")


class LivenessResponse(BaseModel):
    """Model representing a response to a liveness request."""

    alive: bool = Field(description="Flag indicating that the app is alive")


class ErrorResponse(BaseModel):
    """Model representing error payload returned to caller."""

    detail: dict[str, Any] = Field(
        description="Error category, message and timestamp",
        examples=[
            {
                "category": "provider_error",
                "code": "rate_limited",
                "message": "Rate limit reached for requests",
                "timestamp": "2025-10-03T09:31:25+00:00",
                "provider": "openai",
            }
        ],
    )
