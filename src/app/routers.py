"""REST API routers."""

from fastapi import FastAPI

from app.endpoints import ai, health, metrics, providers


def include_routers(app: FastAPI) -> None:
    """Include FastAPI routers for different endpoints.

    Args:
        app: The `FastAPI` app instance.
    """
    app.include_router(ai.router, prefix="/v1")
    app.include_router(providers.router, prefix="/v1")

    # these endpoints are not versioned
    app.include_router(health.router)
    app.include_router(metrics.router)
