"""Closed taxonomy of failures surfaced by the AI orchestration layer.

Provider adapters raise raw errors coming from SDKs or the network stack.
The orchestrator is the only place where such errors are classified, using
`map_provider_error`. Everything that leaves the orchestration layer is an
instance of one of the `AIError` subclasses defined here:

1. `ConfigurationError` - no provider is credentialed
1. `ProviderError` - call to a credentialed provider failed
1. `ValidationError` - normalized request is malformed
1. `RateLimitExceeded` - caller exceeded request ceiling in a time window
1. `InternalError` - anything that could not be classified

Each error can be rendered into a payload with category, message and
timestamp that is safe to show to the caller (no credentials, no
tracebacks).
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import openai
from fastapi import status
from google.genai import errors as genai_errors

from ai.providers.empty_response_error import EmptyResponseError

# provider specific error codes used in ProviderError and in metrics labels
PROVIDER_ERROR_TIMEOUT = "timeout"
PROVIDER_ERROR_AUTHENTICATION = "authentication_failed"
PROVIDER_ERROR_RATE_LIMITED = "rate_limited"
PROVIDER_ERROR_BAD_REQUEST = "bad_request"
PROVIDER_ERROR_NOT_FOUND = "not_found"
PROVIDER_ERROR_CONNECTION = "connection_failed"
PROVIDER_ERROR_SERVER = "server_error"
PROVIDER_ERROR_EMPTY_RESPONSE = "empty_response"
PROVIDER_ERROR_FAILURE = "provider_failure"


class AIError(Exception):
    """Base class for all errors surfaced by the orchestration layer."""

    category: str = "internal_error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        """Initialize error with human readable message and error code."""
        super().__init__(message)
        self.message = message
        self.code = code or self.category
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_payload(self) -> dict[str, Any]:
        """Format error into structure that can be returned to caller."""
        return {
            "category": self.category,
            "code": self.code,
            "message": self.message,
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        """Return textual representation of error."""
        return f"{self.category}: {self.message}"


class ConfigurationError(AIError):
    """No AI provider is configured."""

    category = "configuration_error"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class ProviderError(AIError):
    """Call to a credentialed provider failed."""

    category = "provider_error"
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, provider: str, code: str, message: str) -> None:
        """Initialize error with provider name and provider specific code."""
        super().__init__(message, code)
        self.provider = provider
        if code == PROVIDER_ERROR_TIMEOUT:
            self.status_code = status.HTTP_504_GATEWAY_TIMEOUT

    def to_payload(self) -> dict[str, Any]:
        """Format error including the provider name."""
        payload = super().to_payload()
        payload["provider"] = self.provider
        return payload


class ValidationError(AIError):
    """Normalized request is malformed."""

    category = "validation_error"
    # name of the 422 constant differs between starlette releases
    status_code = 422

    def __init__(self, field: str, message: str) -> None:
        """Initialize error with name of the offending field."""
        super().__init__(message)
        self.field = field

    def to_payload(self) -> dict[str, Any]:
        """Format error including the offending field."""
        payload = super().to_payload()
        payload["field"] = self.field
        return payload


class RateLimitExceeded(AIError):
    """Caller exceeded number of requests allowed in one time window."""

    category = "rate_limit_exceeded"
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(
        self,
        limit: int,
        window: int,
        subject: str = "",
        retry_after: Optional[int] = None,
    ) -> None:
        """Initialize error with limit and window (in seconds) that were hit."""
        super().__init__(
            f"Rate limit of {limit} requests per {window} seconds exceeded"
        )
        self.limit = limit
        self.window = window
        self.subject = subject
        self.retry_after = retry_after

    def to_payload(self) -> dict[str, Any]:
        """Format error including the limit and window."""
        payload = super().to_payload()
        payload["limit"] = self.limit
        payload["window"] = self.window
        if self.retry_after is not None:
            payload["retry_after"] = self.retry_after
        return payload


class InternalError(AIError):
    """Failure that does not fit any other category."""

    category = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _code_from_status(status_code: Optional[int]) -> str:
    """Map HTTP status code returned by provider into provider error code."""
    if status_code is None:
        return PROVIDER_ERROR_FAILURE
    if status_code in (401, 403):
        return PROVIDER_ERROR_AUTHENTICATION
    if status_code == 404:
        return PROVIDER_ERROR_NOT_FOUND
    if status_code == 408:
        return PROVIDER_ERROR_TIMEOUT
    if status_code == 429:
        return PROVIDER_ERROR_RATE_LIMITED
    if 400 <= status_code < 500:
        return PROVIDER_ERROR_BAD_REQUEST
    if status_code >= 500:
        return PROVIDER_ERROR_SERVER
    return PROVIDER_ERROR_FAILURE


def _message_of(error: BaseException) -> str:
    """Retrieve human readable message from raw error."""
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error) or type(error).__name__


def _provider_error_code(error: BaseException) -> Optional[str]:
    """Classify raw provider failure, None means it is not a provider failure."""
    # order matters: timeouts are subclasses of connection errors in openai SDK
    if isinstance(
        error,
        (openai.APITimeoutError, httpx.TimeoutException, asyncio.TimeoutError),
    ):
        return PROVIDER_ERROR_TIMEOUT
    if isinstance(error, openai.APIConnectionError):
        return PROVIDER_ERROR_CONNECTION
    if isinstance(error, openai.APIStatusError):
        return _code_from_status(error.status_code)
    if isinstance(error, genai_errors.APIError):
        return _code_from_status(error.code)
    if isinstance(error, EmptyResponseError):
        return PROVIDER_ERROR_EMPTY_RESPONSE
    if isinstance(error, (httpx.TransportError, ConnectionError)):
        return PROVIDER_ERROR_CONNECTION
    if isinstance(error, httpx.HTTPStatusError):
        return _code_from_status(error.response.status_code)
    if isinstance(error, (openai.APIError, httpx.HTTPError)):
        return PROVIDER_ERROR_FAILURE
    return None


def map_provider_error(error: BaseException, provider: str) -> AIError:
    """Map raw failure raised during provider call into the error taxonomy.

    Args:
        error: The raw exception raised by provider adapter.
        provider: Name of provider that was called.

    Returns:
        Instance of `AIError`. Errors that already belong to the taxonomy are
        returned unchanged.
    """
    if isinstance(error, AIError):
        return error
    code = _provider_error_code(error)
    if code is None:
        return InternalError(_message_of(error))
    return ProviderError(provider, code, _message_of(error))
