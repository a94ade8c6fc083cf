"""Utility functions for endpoint handlers."""

from typing import NoReturn

from fastapi import HTTPException, status

from ai.errors import AIError, RateLimitExceeded
from configuration import AppConfig
from log import get_logger

logger = get_logger(__name__)


def check_configuration_loaded(config: AppConfig) -> None:
    """
    Ensure the application configuration object is loaded.

    Raises:
        HTTPException: HTTP 500 Internal Server Error with detail `{"response":
        "Configuration is not loaded"}` when configuration is missing.
    """
    if config is None or not config.is_loaded:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"response": "Configuration is not loaded"},
        )


def raise_http_error(error: AIError) -> NoReturn:
    """Convert error from AI orchestration layer into HTTP exception.

    The HTTP status code is derived from the error category and the error
    payload is used as response detail. Rate limit errors carry the
    `Retry-After` header.
    """
    headers: dict[str, str] | None = None
    if isinstance(error, RateLimitExceeded) and error.retry_after is not None:
        headers = {"Retry-After": str(error.retry_after)}
    raise HTTPException(
        status_code=error.status_code,
        detail=error.to_payload(),
        headers=headers,
    ) from error
