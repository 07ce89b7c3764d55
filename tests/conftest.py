"""Pytest fixtures for pinning-compliance tests."""

import pytest

from pinning_compliance import RateLimitTracker, ServiceAndTokenPair, Session
from tests.fixtures.pinning_service import ENDPOINT, VALID_TOKEN, FakePinningService


@pytest.fixture
def pair() -> ServiceAndTokenPair:
    """Service pair with a token the fake service accepts."""
    return ServiceAndTokenPair(ENDPOINT, VALID_TOKEN)


@pytest.fixture
def service() -> FakePinningService:
    """Fresh in-memory pinning service."""
    return FakePinningService()


@pytest.fixture
def tracker() -> RateLimitTracker:
    """Rate limit tracker isolated to one test."""
    return RateLimitTracker()


@pytest.fixture
def session(service: FakePinningService, tracker: RateLimitTracker) -> Session:
    """Session routing every request to the fake service."""
    return Session(tracker=tracker, transport=service.transport)
