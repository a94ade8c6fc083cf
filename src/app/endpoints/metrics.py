"""Handler for REST API call to provide metrics."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from client import AIOrchestratorHolder

router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_class=PlainTextResponse)
async def metrics_endpoint_handler() -> PlainTextResponse:
    """
    Handle request to the /metrics endpoint.

    Process GET requests to the /metrics endpoint, returning the
    latest Prometheus metrics in form of a plain text.
    """
    content, content_type = AIOrchestratorHolder().get_metrics().exposition()
    return PlainTextResponse(content, media_type=content_type)
