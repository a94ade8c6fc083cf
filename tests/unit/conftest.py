"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import pytest

from models.requests import AIRequest, Message


class FakeClock:
    """Clock returning manually advanced time."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        """Initialize clock with given time."""
        self.now = now

    def __call__(self) -> float:
        """Return current fake time."""
        return self.now

    def advance(self, seconds: float) -> None:
        """Move clock forward by given number of seconds."""
        self.now += seconds


@pytest.fixture(name="fake_clock")
def fake_clock_fixture() -> FakeClock:
    """Clock that does not move unless advanced by the test."""
    return FakeClock()


@pytest.fixture(name="ping_request")
def ping_request_fixture() -> AIRequest:
    """Simple request with one user message."""
    return AIRequest(
        model="gpt-4o-mini",
        messages=(Message(role="user", content="ping"),),
    )
