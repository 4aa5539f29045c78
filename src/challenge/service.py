"""Service layer for challenge leaderboards."""

from typing import Any

from loguru import logger
from pydantic import ValidationError

from src.challenge.aggregator import ActivityAggregator, AggregationResult
from src.challenge.daily_cap import DAILY_CAP_METERS
from src.challenge.exceptions import InvalidActivityPayload
from src.challenge.ranking import metric_field, rank
from src.challenge.schemas import (
    AthleteGroup,
    ChallengeLeaderboards,
    ChallengeSummary,
    MemberLeaderboardEntry,
    RankingMetric,
)
from src.config import get_settings


def summarize(result: AggregationResult) -> ChallengeSummary:
    """Headline totals for an aggregation run.

    Parameters
    ----------
    result : AggregationResult
        Output of :meth:`ActivityAggregator.aggregate`

    Returns
    -------
    ChallengeSummary
        Counts and distances across every athlete; the per-athlete average
        is 0 when there are no athletes
    """
    athletes = result.athletes.values()
    total_distance = sum(athlete.total_distance for athlete in athletes)
    total_athletes = len(result.athletes)

    return ChallengeSummary(
        total_activities=sum(athlete.activity_count for athlete in athletes),
        total_distance=total_distance,
        total_capped_distance=sum(athlete.capped_distance for athlete in athletes),
        total_athletes=total_athletes,
        total_teams=len(result.teams),
        average_distance_per_athlete=(
            total_distance / total_athletes if total_athletes else 0.0
        ),
    )


def flatten_athlete_groups(groups: Any) -> list[dict[str, Any]]:
    """Turn the per-athlete weekly feed into flat activity records.

    Each activity inherits the group's ``athlete_name`` as its identity and
    the group's team. When the group carries no team, the activity's own
    team is kept.

    Raises
    ------
    InvalidActivityPayload
        If ``groups`` is not a list of athlete groups
    """
    if not isinstance(groups, (list, tuple)):
        raise InvalidActivityPayload(
            f"Expected a list of athlete groups, got {type(groups).__name__}"
        )

    records: list[dict[str, Any]] = []
    for index, raw_group in enumerate(groups):
        try:
            group = AthleteGroup.model_validate(raw_group)
        except ValidationError as e:
            raise InvalidActivityPayload(f"Malformed athlete group at index {index}") from e

        for activity in group.activities:
            athlete = activity.get("athlete")
            athlete = dict(athlete) if isinstance(athlete, dict) else {}
            if group.team:
                athlete["team"] = group.team
            records.append(
                {**activity, "athlete": athlete, "athlete_name": group.athlete_name}
            )
    return records


class ChallengeService:
    """Builds ranked leaderboards from activity records."""

    def __init__(self, daily_cap_meters: float = DAILY_CAP_METERS):
        self.aggregator = ActivityAggregator(daily_cap_meters)

    def build_leaderboards(
        self, records: Any, metric: RankingMetric = "capped"
    ) -> ChallengeLeaderboards:
        """Rank athletes and teams for one activity set.

        Parameters
        ----------
        records : Any
            Sequence of activity records
        metric : str
            "capped" (official, daily cap applied) or "raw" (total distance)

        Returns
        -------
        ChallengeLeaderboards
            Athlete and team leaderboards, best first, plus summary totals

        Raises
        ------
        InvalidActivityPayload
            If ``records`` is not a collection of records
        ValueError
            If ``metric`` is unknown
        """
        metric_field(metric)
        result = self.aggregator.aggregate(records)

        leaderboards = ChallengeLeaderboards(
            metric=metric,
            athletes=rank(result.athletes.values(), metric),
            teams=rank(result.teams.values(), metric),
            summary=summarize(result),
        )

        logger.info(
            "Leaderboards built",
            metric=metric,
            athletes=len(leaderboards.athletes),
            teams=len(leaderboards.teams),
            skipped=result.skipped,
        )
        return leaderboards

    def build_member_leaderboard(
        self, records: Any, roster: Any, metric: RankingMetric = "capped"
    ) -> list[MemberLeaderboardEntry]:
        """Rank every roster member, including those with no activity.

        Parameters
        ----------
        records : Any
            Sequence of activity records
        roster : Any
            Sequence of roster members
        metric : str
            "capped" or "raw"

        Returns
        -------
        list[MemberLeaderboardEntry]
            Exactly one entry per roster member, best first

        Raises
        ------
        InvalidActivityPayload
            If ``records`` is not a collection of records
        InvalidRosterPayload
            If ``roster`` is not a collection of members
        """
        result = self.aggregator.aggregate(records)
        members = self.aggregator.aggregate_roster(roster, result.athletes)
        return rank(members, metric)

    def build_weekly_leaderboards(
        self, groups: Any, metric: RankingMetric = "capped"
    ) -> ChallengeLeaderboards:
        """Rank the per-athlete weekly challenge feed."""
        return self.build_leaderboards(flatten_athlete_groups(groups), metric)


# Singleton instance
challenge_service = ChallengeService(daily_cap_meters=get_settings().DAILY_CAP_METERS)
