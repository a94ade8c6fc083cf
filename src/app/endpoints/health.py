"""Handler for health REST API endpoint.

The liveness endpoint is used to check if service is live. It can be accessed
using GET or HEAD HTTP methods. For HEAD HTTP method, just the HTTP response
code is used.
"""

from typing import Any

from fastapi import APIRouter

from models.responses import LivenessResponse

router = APIRouter(tags=["health"])


get_liveness_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "alive": True,
    },
}


@router.get("/liveness", responses=get_liveness_responses)
@router.head("/liveness", responses=get_liveness_responses)
async def liveness_probe_get_method() -> LivenessResponse:
    """
    Return the liveness status of the service.

    Returns:
        LivenessResponse: Indicates that the service is alive.
    """
    return LivenessResponse(alive=True)
