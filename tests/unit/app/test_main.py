"""Unit tests for the FastAPI application and its REST API."""

from typing import Optional

import pytest
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture

from ai.errors import ConfigurationError
from ai.providers.base import BaseProvider
from app.main import app
from models.requests import AIRequest

PING = {"model": "gpt-4o-mini", "messages": [{"role": "user", "content": "ping"}]}


class PongProvider(BaseProvider):
    """Provider adapter answering every request with the same content."""

    name = "openai"
    content: Optional[str] = "pong"
    error: Optional[BaseException] = None
    calls = 0

    async def invoke(self, request: AIRequest, timeout: float) -> str:
        """Return prepared content."""
        type(self).calls += 1
        if self.error is not None:
            raise self.error
        return self._ensure_content(self.content)


@pytest.fixture(name="client")
def client_fixture(mocker: MockerFixture):
    """Test client with fake provider adapters."""
    PongProvider.calls = 0
    PongProvider.error = None
    mocker.patch.dict(
        "ai.orchestrator.PROVIDER_CLASSES",
        {"openai": PongProvider, "gemini": PongProvider},
    )
    # lifespan builds fresh orchestrator, cache and rate limiters
    with TestClient(app) as client:
        yield client


def test_liveness(client: TestClient) -> None:
    """Test the liveness probe."""
    response = client.get("/liveness")
    assert response.status_code == 200
    assert response.json() == {"alive": True}


def test_generate(client: TestClient) -> None:
    """Test that request is answered by provider, then by cache."""
    response = client.post("/v1/ai/generate", json=PING)
    assert response.status_code == 200
    body = response.json()
    assert body["content"] == "pong"
    assert body["provider"] == "openai"
    assert body["latency"] >= 0

    response = client.post("/v1/ai/generate", json=PING)
    assert response.status_code == 200
    assert PongProvider.calls == 1


def test_generate_malformed_request(client: TestClient) -> None:
    """Test that malformed request is rejected before reaching provider."""
    response = client.post("/v1/ai/generate", json={"model": "gpt-4o", "messages": []})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["category"] == "validation_error"
    assert detail["field"] == "messages"
    assert detail["timestamp"]
    assert PongProvider.calls == 0


def test_analyze_temperature_out_of_range(client: TestClient) -> None:
    """Test that out of range sampling temperature is reported with its field."""
    response = client.post("/v1/ai/analyze", json=PING | {"temperature": 5})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["category"] == "validation_error"
    assert detail["field"] == "temperature"
    assert "temperature" in detail["message"]
    assert PongProvider.calls == 0


def test_generate_provider_failure(client: TestClient) -> None:
    """Test that provider failure is reported as bad gateway."""
    PongProvider.error = ConnectionError("refused")
    response = client.post("/v1/ai/generate", json=PING)
    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["category"] == "provider_error"
    assert detail["code"] == "connection_failed"
    assert detail["provider"] == "openai"


def test_generate_no_provider(client: TestClient, mocker: MockerFixture) -> None:
    """Test that missing credentials are reported as service unavailable."""
    mocker.patch(
        "ai.orchestrator.select_provider",
        side_effect=ConfigurationError("No AI providers configured"),
    )
    response = client.post("/v1/ai/generate", json=PING)
    assert response.status_code == 503
    assert response.json()["detail"]["message"] == "No AI providers configured"


def test_analyze_rate_limit(client: TestClient) -> None:
    """Test that expensive policy rejects eleventh analysis in a window."""
    for i in range(10):
        request = PING | {"messages": [{"role": "user", "content": f"image {i}"}]}
        response = client.post("/v1/ai/analyze", json=request)
        assert response.status_code == 200

    response = client.post("/v1/ai/analyze", json=PING)
    assert response.status_code == 429
    assert int(response.headers["Retry-After"]) > 0
    detail = response.json()["detail"]
    assert detail["category"] == "rate_limit_exceeded"
    assert detail["limit"] == 10
    assert detail["window"] == 3600

    # default policy is not affected
    response = client.post("/v1/ai/generate", json=PING)
    assert response.status_code == 200


def test_providers(client: TestClient) -> None:
    """Test the provider status endpoint."""
    response = client.get("/v1/ai/providers")
    assert response.status_code == 200
    body = response.json()
    assert body["providers"] == {"openai": True, "gemini": False}
    assert body["timestamp"]


def test_performance(client: TestClient) -> None:
    """Test the performance summary endpoint."""
    client.post("/v1/ai/generate", json=PING)
    response = client.get("/v1/ai/performance")
    assert response.status_code == 200
    body = response.json()
    assert body["success_rate"] == 1.0
    assert body["average_latency"] >= 0


def test_clear_cache(client: TestClient) -> None:
    """Test that cleared cache forces next request to reach provider."""
    client.post("/v1/ai/generate", json=PING)

    response = client.delete("/v1/ai/cache")
    assert response.status_code == 200
    assert response.json() == {"key": None, "success": True}

    client.post("/v1/ai/generate", json=PING)
    assert PongProvider.calls == 2


def test_clear_cache_single_key(client: TestClient) -> None:
    """Test clearing one cache entry."""
    response = client.delete("/v1/ai/cache", params={"key": "ai:0000abcd"})
    assert response.status_code == 200
    assert response.json() == {"key": "ai:0000abcd", "success": True}


def test_metrics(client: TestClient) -> None:
    """Test the Prometheus metrics endpoint."""
    client.post("/v1/ai/generate", json=PING)
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "ai_requests_total" in response.text
    assert 'ai_provider_configured{provider="openai"} 1.0' in response.text
