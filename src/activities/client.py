"""Async client for the challenge activities feed."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Literal, Optional

import httpx

from src.activities.exceptions import (
    ActivitiesApiError,
    ActivitiesNotFound,
    RateLimitExceeded,
)
from src.config import get_settings
from src.core.lifespan import manager

logger = logging.getLogger(__name__)

ChallengePeriod = Literal["firstWeek", "secondWeek"]


class ActivitiesClient:
    """HTTP client for the activities feed.

    The feed returns either a flat list of activity records or, for a
    weekly challenge period, a list of per-athlete groups. Payloads are
    returned as decoded JSON; validation belongs to the challenge layer.
    """

    def __init__(self, http_client: httpx.AsyncClient, url: str):
        """Initialize the client.

        Parameters
        ----------
        http_client : httpx.AsyncClient
            Shared connection pool, owned by the caller
        url : str
            Full URL of the activities endpoint
        """
        self.http_client = http_client
        self.url = url

    async def _get(self, params: Optional[dict[str, Any]] = None) -> Any:
        """GET the feed and decode the JSON body.

        Raises
        ------
        ActivitiesNotFound
            When the feed answers 404
        RateLimitExceeded
            When the feed answers 429
        ActivitiesApiError
            For other HTTP errors, transport failures and non-JSON bodies
        """
        logger.debug(f"GET {self.url} with params {params}")

        try:
            response = await self.http_client.get(self.url, params=params)
        except httpx.HTTPError as e:
            raise ActivitiesApiError(f"Request to activities feed failed: {e}") from e

        self._handle_errors(response)

        try:
            return response.json()
        except ValueError as e:
            raise ActivitiesApiError("Activities feed returned invalid JSON") from e

    def _handle_errors(self, response: httpx.Response) -> None:
        if response.is_success:
            return

        error_msg = response.text[:200]
        if response.status_code == 404:
            raise ActivitiesNotFound(f"Not found: {error_msg}")
        elif response.status_code == 429:
            raise RateLimitExceeded(f"Rate limit exceeded: {error_msg}")
        elif 400 <= response.status_code < 500:
            raise ActivitiesApiError(f"Client error {response.status_code}: {error_msg}")
        else:
            raise ActivitiesApiError(f"Server error {response.status_code}: {error_msg}")

    async def fetch_activities(self) -> Any:
        """Fetch every activity record logged for the challenge.

        Returns
        -------
        Any
            Decoded payload, normally a list of activity records
        """
        data = await self._get()
        if isinstance(data, list):
            logger.info(f"Fetched {len(data)} activities")
        return data

    async def fetch_weekly_challenge(self, period: ChallengePeriod) -> Any:
        """Fetch the per-athlete groups for one challenge week.

        Parameters
        ----------
        period : str
            "firstWeek" or "secondWeek"

        Returns
        -------
        Any
            Decoded payload, normally a list of
            ``{athlete_name, team, activities}`` groups
        """
        data = await self._get(params={"period": period})
        if isinstance(data, list):
            logger.info(f"Fetched {len(data)} athlete groups for {period}")
        return data


@manager.add
@asynccontextmanager
async def activities_client_lifespan() -> AsyncIterator[dict]:
    """Own the HTTP connection pool used to reach the activities feed."""
    settings = get_settings()

    async with httpx.AsyncClient(timeout=settings.ACTIVITIES_API_TIMEOUT) as http_client:
        logger.info("Activities client ready")
        yield {
            "activities_client": ActivitiesClient(
                http_client, settings.ACTIVITIES_API_URL
            )
        }

    logger.info("Activities client closed")
