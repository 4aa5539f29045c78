"""API endpoints for challenge leaderboards."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from loguru import logger

from src.activities.client import ActivitiesClient, ChallengePeriod
from src.activities.exceptions import ActivitiesApiError
from src.challenge.exceptions import ChallengeException
from src.challenge.schemas import (
    AthleteLeaderboardEntry,
    ChallengeLeaderboards,
    MemberLeaderboardEntry,
    MemberLeaderboardRequest,
    RankingMetric,
    TeamLeaderboardEntry,
)
from src.challenge.service import challenge_service
from src.config import get_settings
from src.dependencies import get_activities_client

router = APIRouter(
    prefix="/leaderboard",
    tags=["leaderboard"],
)

METRIC_DESCRIPTION = (
    "Ranking metric: 'capped' (10km daily cap per athlete) or 'raw' (total distance). "
    "Defaults to the configured metric."
)
PERIOD_DESCRIPTION = "Weekly challenge period: firstWeek or secondWeek. Omit for all activities."


def _resolve_metric(metric: Optional[RankingMetric]) -> RankingMetric:
    return metric or get_settings().DEFAULT_RANKING_METRIC


async def _fetched_leaderboards(
    client: ActivitiesClient,
    metric: Optional[RankingMetric],
    period: Optional[ChallengePeriod],
) -> ChallengeLeaderboards:
    """Fetch the feed and rank it.

    Raises
    ------
    HTTPException
        502 if the feed cannot be read or returns an unusable payload
    """
    metric = _resolve_metric(metric)
    try:
        if period is None:
            records = await client.fetch_activities()
            return challenge_service.build_leaderboards(records, metric)
        groups = await client.fetch_weekly_challenge(period)
        return challenge_service.build_weekly_leaderboards(groups, metric)
    except ActivitiesApiError as e:
        logger.error("Activities feed unavailable", error=str(e), period=period)
        raise HTTPException(status_code=502, detail=f"Activities feed error: {e}")
    except ChallengeException as e:
        logger.error("Activities feed returned unusable payload", error=str(e))
        raise HTTPException(status_code=502, detail=f"Invalid activities payload: {e}")


@router.get("", response_model=ChallengeLeaderboards)
async def get_leaderboards(
    metric: Optional[RankingMetric] = Query(None, description=METRIC_DESCRIPTION),
    period: Optional[ChallengePeriod] = Query(None, description=PERIOD_DESCRIPTION),
    client: ActivitiesClient = Depends(get_activities_client),
):
    """Athlete and team leaderboards plus summary totals for the live feed.

    Parameters
    ----------
    metric : str | None
        "capped" or "raw"
    period : str | None
        Weekly challenge period, or None for every activity
    client : ActivitiesClient
        Activities feed client (injected)

    Returns
    -------
    ChallengeLeaderboards
        Ranked athletes and teams with summary totals

    Raises
    ------
    HTTPException
        502 if the activities feed fails
    """
    return await _fetched_leaderboards(client, metric, period)


@router.get("/athletes", response_model=list[AthleteLeaderboardEntry])
async def get_athlete_leaderboard(
    metric: Optional[RankingMetric] = Query(None, description=METRIC_DESCRIPTION),
    period: Optional[ChallengePeriod] = Query(None, description=PERIOD_DESCRIPTION),
    client: ActivitiesClient = Depends(get_activities_client),
):
    """Athletes ranked by the chosen metric."""
    leaderboards = await _fetched_leaderboards(client, metric, period)
    return leaderboards.athletes


@router.get("/teams", response_model=list[TeamLeaderboardEntry])
async def get_team_leaderboard(
    metric: Optional[RankingMetric] = Query(None, description=METRIC_DESCRIPTION),
    period: Optional[ChallengePeriod] = Query(None, description=PERIOD_DESCRIPTION),
    client: ActivitiesClient = Depends(get_activities_client),
):
    """Teams ranked by the chosen metric; the cap applies per member."""
    leaderboards = await _fetched_leaderboards(client, metric, period)
    return leaderboards.teams


@router.post("/compute", response_model=ChallengeLeaderboards)
async def compute_leaderboards(
    activities: Any = Body(..., description="List of activity records"),
    metric: Optional[RankingMetric] = Query(None, description=METRIC_DESCRIPTION),
):
    """Rank a caller-supplied list of activity records.

    Parameters
    ----------
    activities : Any
        JSON array of activity records
    metric : str | None
        "capped" or "raw"

    Returns
    -------
    ChallengeLeaderboards
        Ranked athletes and teams with summary totals

    Raises
    ------
    HTTPException
        422 if the body is not a list of activity records
    """
    try:
        return challenge_service.build_leaderboards(activities, _resolve_metric(metric))
    except ChallengeException as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/members", response_model=list[MemberLeaderboardEntry])
async def compute_member_leaderboard(
    body: MemberLeaderboardRequest,
    metric: Optional[RankingMetric] = Query(None, description=METRIC_DESCRIPTION),
):
    """Rank every roster member against a caller-supplied activity list.

    Members whose names match no activity are listed with zero distance.

    Raises
    ------
    HTTPException
        422 if the roster or the activities are not lists
    """
    try:
        return challenge_service.build_member_leaderboard(
            body.activities, body.roster, _resolve_metric(metric)
        )
    except ChallengeException as e:
        raise HTTPException(status_code=422, detail=str(e))
