"""Definition of FastAPI based web service."""

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

import constants
import version
from app import routers
from client import AIOrchestratorHolder
from configuration import configuration
from log import get_logger

logger = get_logger(__name__)

logger.info("Initializing app")


# running on FastAPI startup
@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """
    Initialize app resources.

    FastAPI lifespan context: loads configuration (when not loaded already)
    and builds the AI orchestrator with its cache, metrics and rate limiters.
    """
    if not configuration.is_loaded:
        configuration.load_configuration(os.environ[constants.CONFIGURATION_PATH_ENV])
    AIOrchestratorHolder().load(configuration.configuration)
    logger.info(
        "Configured providers: %s", configuration.providers_configuration.credentials()
    )
    logger.info("App startup complete")
    yield


app = FastAPI(
    title="AI orchestrator service - OpenAPI",
    summary="AI orchestrator service REST API.",
    description="Routes AI requests to configured providers with caching, "
    "rate limiting and metrics.",
    version=version.__version__,
    license_info={
        "name": "Apache 2.0",
        "url": "https://www.apache.org/licenses/LICENSE-2.0.html",
    },
    servers=[
        {"url": "http://localhost:8080/", "description": "Locally running service"}
    ],
    lifespan=lifespan,
)

logger.info("Including routers")
routers.include_routers(app)
