"""Tests for the authorization service."""

import asyncio

from health_tracker.domain.metrics import AuthorizationStatus
from health_tracker.services.authorization import AuthorizationService
from tests.conftest import FakeHealthSource


def test_status_is_reported_by_source() -> None:
    source = FakeHealthSource(status=AuthorizationStatus.NOT_DETERMINED)
    service = AuthorizationService(source)

    assert asyncio.run(service.get_status()) is AuthorizationStatus.NOT_DETERMINED


def test_request_returns_actual_outcome() -> None:
    source = FakeHealthSource(
        status=AuthorizationStatus.NOT_DETERMINED,
        requested_status=AuthorizationStatus.DENIED,
    )
    service = AuthorizationService(source)

    result = asyncio.run(service.request())

    assert result is AuthorizationStatus.DENIED
    assert source.authorization_requests == 1
    assert AuthorizationService.is_limited_mode(result) is True
    assert AuthorizationService.is_limited_mode(AuthorizationStatus.GRANTED) is False
