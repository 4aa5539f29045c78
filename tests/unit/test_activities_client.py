"""
Unit tests for ActivitiesClient.

Uses httpx.MockTransport, so no request leaves the process.
"""

import httpx
import pytest

from src.activities.client import ActivitiesClient
from src.activities.exceptions import (
    ActivitiesApiError,
    ActivitiesNotFound,
    RateLimitExceeded,
)

FEED_URL = "https://feed.example.test/activities"


def _client(handler) -> ActivitiesClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ActivitiesClient(http_client, FEED_URL)


@pytest.mark.asyncio
class TestFetch:
    """Test successful fetches."""

    async def test_fetch_activities(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == FEED_URL
            return httpx.Response(200, json=[{"distance": 1000}])

        assert await _client(handler).fetch_activities() == [{"distance": 1000}]

    async def test_fetch_weekly_challenge_sends_period(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["period"] = request.url.params.get("period")
            return httpx.Response(200, json=[])

        assert await _client(handler).fetch_weekly_challenge("secondWeek") == []
        assert seen["period"] == "secondWeek"


@pytest.mark.asyncio
class TestErrors:
    """Test mapping of feed failures to exceptions."""

    @pytest.mark.parametrize(
        "status,exc_type",
        [
            (404, ActivitiesNotFound),
            (429, RateLimitExceeded),
            (400, ActivitiesApiError),
            (503, ActivitiesApiError),
        ],
    )
    async def test_status_codes(self, status, exc_type):
        client = _client(lambda request: httpx.Response(status, text="nope"))
        with pytest.raises(exc_type):
            await client.fetch_activities()

    async def test_invalid_json(self):
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ActivitiesApiError, match="invalid JSON"):
            await client.fetch_activities()

    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ActivitiesApiError, match="failed"):
            await _client(handler).fetch_activities()
