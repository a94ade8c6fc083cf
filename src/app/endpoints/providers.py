"""Handler for REST API call reporting status of AI providers."""

from typing import Any

from fastapi import APIRouter

from client import AIOrchestratorHolder
from configuration import configuration
from models.responses import ProviderStatus
from utils.endpoints import check_configuration_loaded

router = APIRouter(tags=["providers"])


providers_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "providers": {"openai": True, "gemini": False},
        "timestamp": "2025-10-03T09:31:25+00:00",
    },
    500: {"description": "Configuration is not loaded"},
}


@router.get("/ai/providers", responses=providers_responses)
async def providers_endpoint_handler() -> ProviderStatus:
    """
    Handle GET requests to report which AI providers are configured.

    Credentials are resolved on every call, so the response reflects the
    current environment of the service.
    """
    check_configuration_loaded(configuration)
    return AIOrchestratorHolder().get_orchestrator().get_provider_status()
