"""FastAPI dependencies for accessing application state."""

from typing import cast

from fastapi import Request

from src.activities.client import ActivitiesClient


async def get_activities_client(request: Request) -> ActivitiesClient:
    """
    Get the activities feed client from application state.

    Usage:
        @router.get("/leaderboard")
        async def leaderboard(client: ActivitiesClient = Depends(get_activities_client)):
            ...
    """
    return cast(ActivitiesClient, request.state.activities_client)
