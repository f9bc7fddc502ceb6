"""Test configuration and utilities."""

from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest

from sendivent.core.entities import ApiKey, Contact, SendRequest, SendResponse
from sendivent.core.interfaces import NotificationDispatcher


class RecordingDispatcher(NotificationDispatcher):
    """In-memory dispatcher that records every request it is given."""

    def __init__(self, response: SendResponse = None):
        self.awaited: List[SendRequest] = []
        self.best_effort: List[SendRequest] = []
        self.response = response or SendResponse(success=True, data=["q1"])
        self.error: Exception = None

    async def send_and_await(self, request):
        self.awaited.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    async def send_best_effort(self, request):
        self.best_effort.append(request)


@pytest.fixture
def sandbox_key():
    """A sandbox API key."""
    return ApiKey("test_0123456789abcdef")


@pytest.fixture
def live_key():
    """A production API key."""
    return ApiKey("live_0123456789abcdef")


@pytest.fixture
def recording_dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def sample_contact():
    """A fully populated contact."""
    return Contact(
        id="user-12345",
        name="John Doe",
        avatar="https://example.com/avatar.jpg",
        email="user@example.com",
        phone="+1234567890",
        meta={"tier": "premium", "timezone": "America/New_York"},
    )


@pytest.fixture
def welcome_request():
    """A built request for the welcome event."""
    return SendRequest(
        path="send/welcome",
        body={"payload": {"name": "Jane"}, "to": "user@example.com"},
        headers={"X-Idempotency-Key": "order-12345"},
    )


def _make_aiohttp_response(status: int = 200, json_body=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=json_body)
    response.text = AsyncMock(return_value=text)
    return response


@pytest.fixture
def make_aiohttp_response():
    """Factory for mock aiohttp responses usable inside ``async with``."""
    return _make_aiohttp_response
