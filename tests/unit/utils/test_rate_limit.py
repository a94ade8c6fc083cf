"""Unit tests for rate limiting FastAPI dependency."""

import pytest
from fastapi import HTTPException
from pytest_mock import MockerFixture

from ai.errors import RateLimitExceeded
from utils.rate_limit import (
    UNKNOWN_SUBJECT,
    is_exempt,
    rate_limit_dependency,
    subject_from_request,
)


def _request(mocker: MockerFixture, host=None, user_id=None):
    """Construct mocked request from given host."""
    request = mocker.Mock()
    request.state.user_id = user_id
    if host is None:
        request.client = None
    else:
        request.client.host = host
    return request


def test_subject_from_user_id(mocker: MockerFixture) -> None:
    """Test that authenticated user is preferred over address."""
    request = _request(mocker, host="10.0.0.1", user_id="jane")
    assert subject_from_request(request) == "user:jane"


def test_subject_from_address(mocker: MockerFixture) -> None:
    """Test that client address is used for anonymous caller."""
    request = _request(mocker, host="10.0.0.1")
    assert subject_from_request(request) == "ip:10.0.0.1"


def test_subject_unknown(mocker: MockerFixture) -> None:
    """Test caller without any identification."""
    assert subject_from_request(_request(mocker)) == UNKNOWN_SUBJECT


@pytest.mark.parametrize("host", ["127.0.0.1", "::1", "localhost"])
def test_loopback_is_exempt(mocker: MockerFixture, host: str) -> None:
    """Test that local callers are exempt."""
    assert is_exempt(_request(mocker, host=host)) is True


def test_remote_is_not_exempt(mocker: MockerFixture) -> None:
    """Test that remote callers are not exempt."""
    assert is_exempt(_request(mocker, host="10.0.0.1")) is False
    assert is_exempt(_request(mocker)) is False


def test_dependency_admits_request(mocker: MockerFixture) -> None:
    """Test that request within limit is admitted."""
    limiter = mocker.Mock()
    mocker.patch(
        "utils.rate_limit.AIOrchestratorHolder.get_rate_limiter", return_value=limiter
    )
    dependency = rate_limit_dependency("default")

    dependency(_request(mocker, host="10.0.0.1"))

    limiter.hit.assert_called_once_with("ip:10.0.0.1")


def test_dependency_skips_exempt(mocker: MockerFixture) -> None:
    """Test that exempt caller is not counted."""
    limiter = mocker.Mock()
    mocker.patch(
        "utils.rate_limit.AIOrchestratorHolder.get_rate_limiter", return_value=limiter
    )
    dependency = rate_limit_dependency("default", exempt=lambda _: True)

    dependency(_request(mocker, host="10.0.0.1"))

    limiter.hit.assert_not_called()


def test_dependency_custom_key(mocker: MockerFixture) -> None:
    """Test that custom key function is used."""
    limiter = mocker.Mock()
    mocker.patch(
        "utils.rate_limit.AIOrchestratorHolder.get_rate_limiter", return_value=limiter
    )
    dependency = rate_limit_dependency("expensive", key_func=lambda _: "tenant:acme")

    dependency(_request(mocker, host="10.0.0.1"))

    limiter.hit.assert_called_once_with("tenant:acme")


def test_dependency_rejects_request(mocker: MockerFixture) -> None:
    """Test that request over limit is rejected with 429."""
    limiter = mocker.Mock()
    limiter.hit.side_effect = RateLimitExceeded(
        limit=100, window=900, subject="ip:10.0.0.1", retry_after=30
    )
    mocker.patch(
        "utils.rate_limit.AIOrchestratorHolder.get_rate_limiter", return_value=limiter
    )
    dependency = rate_limit_dependency("default")

    with pytest.raises(HTTPException) as e:
        dependency(_request(mocker, host="10.0.0.1"))

    assert e.value.status_code == 429
    assert e.value.headers == {"Retry-After": "30"}
    assert e.value.detail["category"] == "rate_limit_exceeded"
    assert e.value.detail["limit"] == 100
    assert e.value.detail["window"] == 900
