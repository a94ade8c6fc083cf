"""Handlers for REST API calls executing AI requests."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

import constants
from ai.errors import AIError
from client import AIOrchestratorHolder
from configuration import configuration
from log import get_logger
from models.requests import AIRequest, OperationClass
from models.responses import (
    AIResponse,
    CacheClearedResponse,
    ErrorResponse,
    PerformanceMetrics,
)
from utils.endpoints import check_configuration_loaded, raise_http_error
from utils.rate_limit import rate_limit_dependency

logger = get_logger("app.endpoints.handlers")
router = APIRouter(tags=["ai"])

REQUEST_BODY_DESCRIPTION = (
    "AI request with model, messages and optional response_format, "
    "temperature, max_tokens and stream"
)


execute_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Response produced by provider or taken from cache",
        "model": AIResponse,
    },
    422: {"description": "Malformed request", "model": ErrorResponse},
    429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    502: {"description": "Provider call failed", "model": ErrorResponse},
    503: {"description": "No AI provider is configured", "model": ErrorResponse},
    504: {"description": "Provider call timed out", "model": ErrorResponse},
}


async def _execute(payload: dict[str, Any], operation: OperationClass) -> AIResponse:
    """Validate payload and execute it with orchestrator.

    Malformed payload and failures of the orchestrator are converted to HTTP
    errors carrying the error payload.
    """
    check_configuration_loaded(configuration)
    orchestrator = AIOrchestratorHolder().get_orchestrator()
    try:
        request = AIRequest.from_dict(payload)
        return await orchestrator.execute(request, operation)
    except AIError as e:
        raise_http_error(e)


@router.post(
    "/ai/generate",
    responses=execute_responses,
    dependencies=[Depends(rate_limit_dependency(constants.RATE_LIMIT_POLICY_DEFAULT))],
)
async def generate_endpoint_handler(
    payload: dict[str, Any] = Body(..., description=REQUEST_BODY_DESCRIPTION),
) -> AIResponse:
    """Handle request for text generation."""
    return await _execute(payload, OperationClass.TEXT)


@router.post(
    "/ai/analyze",
    responses=execute_responses,
    dependencies=[
        Depends(rate_limit_dependency(constants.RATE_LIMIT_POLICY_EXPENSIVE))
    ],
)
async def analyze_endpoint_handler(
    payload: dict[str, Any] = Body(..., description=REQUEST_BODY_DESCRIPTION),
) -> AIResponse:
    """Handle request for multimodal analysis.

    Analysis is counted against the `expensive` rate limit policy and uses
    the longer multimodal timeout.
    """
    return await _execute(payload, OperationClass.MULTIMODAL)


@router.get("/ai/performance")
async def performance_endpoint_handler() -> PerformanceMetrics:
    """Return average latency and success rate of provider calls."""
    check_configuration_loaded(configuration)
    return AIOrchestratorHolder().get_orchestrator().get_performance_metrics()


@router.delete("/ai/cache")
async def clear_cache_endpoint_handler(
    key: Optional[str] = Query(None, description="Cache key to clear"),
) -> CacheClearedResponse:
    """Clear one cached response, or all of them when no key is given."""
    check_configuration_loaded(configuration)
    AIOrchestratorHolder().get_orchestrator().clear_cache(key)
    logger.info("Cache cleared (key: %s)", key)
    return CacheClearedResponse(key=key, success=True)
