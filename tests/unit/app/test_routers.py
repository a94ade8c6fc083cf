"""Unit tests for routers.py."""

from typing import Any, Optional

from fastapi import FastAPI

from app.routers import include_routers  # noqa:E402

from app.endpoints import ai, health, metrics, providers  # noqa:E402


class MockFastAPI(FastAPI):
    """Mock class for FastAPI."""

    def __init__(self) -> None:  # pylint: disable=super-init-not-called
        """Initialize mock class."""
        self.routers: list[tuple[Any, Optional[str]]] = []

    def include_router(  # pylint: disable=too-many-arguments
        self,
        router: Any,
        *,
        prefix: str = "",
        tags=None,
        dependencies=None,
        responses=None,
        deprecated=None,
        include_in_schema=None,
        default_response_class=None,
        callbacks=None,
        generate_unique_id_function=None,
    ) -> None:
        """Register new router."""
        self.routers.append((router, prefix))

    def get_routers(self) -> list[Any]:
        """Retrieve all registered routers."""
        return [r[0] for r in self.routers]

    def get_router_prefix(self, router: Any) -> Optional[str]:
        """Retrieve router prefix configured for mocked REST API."""
        return list(filter(lambda r: r[0] == router, self.routers))[0][1]


def test_include_routers() -> None:
    """Test the function include_routers."""
    app = MockFastAPI()
    include_routers(app)

    # are all routers added?
    assert len(app.routers) == 4
    assert ai.router in app.get_routers()
    assert providers.router in app.get_routers()
    assert health.router in app.get_routers()
    assert metrics.router in app.get_routers()


def test_check_prefixes() -> None:
    """Test the router prefixes."""
    app = MockFastAPI()
    include_routers(app)

    assert app.get_router_prefix(ai.router) == "/v1"
    assert app.get_router_prefix(providers.router) == "/v1"
    assert app.get_router_prefix(health.router) == ""
    assert app.get_router_prefix(metrics.router) == ""
