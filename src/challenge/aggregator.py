"""Per-athlete and per-team aggregation of activity records.

A single forward pass builds both collections. Each aggregate keeps its raw
distance and its capped distance; the team cap is tracked per member, so one
member's long day never reduces a teammate's headroom.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from loguru import logger

from src.challenge import daily_cap
from src.challenge.daily_cap import DAILY_CAP_METERS, DailyBucket
from src.challenge.dates import resolve_day_key
from src.challenge.exceptions import InvalidActivityPayload, InvalidRosterPayload
from src.challenge.identity import (
    activity_identity,
    match_activity_to_member,
    resolve_name,
)
from src.challenge.schemas import (
    ActivityLevel,
    ActivityRecord,
    AthleteLeaderboardEntry,
    MemberLeaderboardEntry,
    RosterMember,
    TeamLeaderboardEntry,
)

NO_TEAM = "No Team"

HIGH_ACTIVITY_THRESHOLD = 10
MEDIUM_ACTIVITY_THRESHOLD = 5


def _safe_divide(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def activity_level(activity_count: int) -> ActivityLevel:
    """Engagement label shown next to roster members."""
    if activity_count >= HIGH_ACTIVITY_THRESHOLD:
        return "High"
    if activity_count >= MEDIUM_ACTIVITY_THRESHOLD:
        return "Medium"
    return "Low"


@dataclass
class AthleteAggregate:
    """Running totals for one athlete."""

    name: str
    team: str
    first_seen: int
    activity_count: int = 0
    total_distance: float = 0.0
    capped_distance: float = 0.0
    activities: list[ActivityRecord] = field(default_factory=list)
    daily: DailyBucket = field(default_factory=DailyBucket)

    @property
    def best_activity(self) -> Optional[ActivityRecord]:
        """Longest activity; the earliest one wins a tie."""
        best = None
        for activity in self.activities:
            if best is None or activity.distance > best.distance:
                best = activity
        return best

    @property
    def average_distance(self) -> float:
        return _safe_divide(self.total_distance, self.activity_count)

    @property
    def days_active(self) -> int:
        return len(self.daily)

    def to_entry(self, rank: int) -> AthleteLeaderboardEntry:
        best = self.best_activity
        return AthleteLeaderboardEntry(
            rank=rank,
            name=self.name,
            team=self.team,
            activity_count=self.activity_count,
            total_distance=self.total_distance,
            capped_distance=self.capped_distance,
            total_distance_km=self.total_distance / 1000,
            capped_distance_km=self.capped_distance / 1000,
            average_distance=self.average_distance,
            best_activity_distance=best.distance if best else 0.0,
            days_active=self.days_active,
        )


@dataclass
class TeamAggregate:
    """Running totals for one team.

    ``daily`` is keyed by ``(athlete, day_key)`` so the cap applies to each
    member separately.
    """

    name: str
    first_seen: int
    activity_count: int = 0
    total_distance: float = 0.0
    capped_distance: float = 0.0
    members: set[str] = field(default_factory=set)
    activities: list[ActivityRecord] = field(default_factory=list)
    daily: DailyBucket = field(default_factory=DailyBucket)

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def average_distance(self) -> float:
        return _safe_divide(self.total_distance, self.activity_count)

    @property
    def average_distance_per_member(self) -> float:
        return _safe_divide(self.total_distance, self.member_count)

    @property
    def average_capped_distance_per_member(self) -> float:
        return _safe_divide(self.capped_distance, self.member_count)

    def to_entry(self, rank: int) -> TeamLeaderboardEntry:
        return TeamLeaderboardEntry(
            rank=rank,
            name=self.name,
            activity_count=self.activity_count,
            member_count=self.member_count,
            total_distance=self.total_distance,
            capped_distance=self.capped_distance,
            total_distance_km=self.total_distance / 1000,
            capped_distance_km=self.capped_distance / 1000,
            average_distance=self.average_distance,
            average_distance_per_member=self.average_distance_per_member,
            average_capped_distance_per_member=self.average_capped_distance_per_member,
        )


@dataclass
class MemberAggregate:
    """A roster member paired with the activity aggregate it matched."""

    name: str
    team: str
    first_seen: int
    athlete: AthleteAggregate
    matched_name: Optional[str] = None

    @property
    def total_distance(self) -> float:
        return self.athlete.total_distance

    @property
    def capped_distance(self) -> float:
        return self.athlete.capped_distance

    def to_entry(self, rank: int) -> MemberLeaderboardEntry:
        athlete_entry = self.athlete.to_entry(rank)
        return MemberLeaderboardEntry(
            **athlete_entry.model_dump(exclude={"name", "team"}),
            name=self.name,
            team=self.team,
            matched_name=self.matched_name,
            activity_level=activity_level(self.athlete.activity_count),
        )


@dataclass
class AggregationResult:
    """Athlete and team aggregates in first-seen order."""

    athletes: dict[str, AthleteAggregate]
    teams: dict[str, TeamAggregate]
    skipped: int = 0


def _is_collection(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(
        value, (str, bytes, Mapping)
    )


def coerce_records(records: Any) -> tuple[list[ActivityRecord], int]:
    """Validate an activity collection before anything is aggregated.

    Parameters
    ----------
    records : Any
        Sequence of mappings or ``ActivityRecord`` instances

    Returns
    -------
    tuple[list[ActivityRecord], int]
        Usable records, and how many elements were skipped because they
        were not records at all

    Raises
    ------
    InvalidActivityPayload
        If ``records`` is not a collection of records
    """
    if records is None or not _is_collection(records):
        raise InvalidActivityPayload(
            f"Expected a list of activity records, got {type(records).__name__}"
        )

    coerced: list[ActivityRecord] = []
    skipped = 0
    for index, item in enumerate(records):
        if isinstance(item, ActivityRecord):
            coerced.append(item)
            continue
        if not isinstance(item, Mapping):
            logger.warning(
                "Skipping activity that is not a record",
                index=index,
                item_type=type(item).__name__,
            )
            skipped += 1
            continue
        coerced.append(ActivityRecord.model_validate(dict(item)))
    return coerced, skipped


def coerce_roster(roster: Any) -> list[RosterMember]:
    """Validate a roster collection; non-mapping entries are skipped."""
    if roster is None or not _is_collection(roster):
        raise InvalidRosterPayload(
            f"Expected a list of roster members, got {type(roster).__name__}"
        )

    members: list[RosterMember] = []
    for index, item in enumerate(roster):
        if isinstance(item, RosterMember):
            members.append(item)
        elif isinstance(item, Mapping):
            members.append(RosterMember.model_validate(dict(item)))
        else:
            logger.warning("Skipping roster entry that is not a member", index=index)
    return members


class ActivityAggregator:
    """Builds athlete and team aggregates from activity records."""

    def __init__(self, daily_cap_meters: float = DAILY_CAP_METERS):
        self.daily_cap_meters = daily_cap_meters

    def aggregate(self, records: Any) -> AggregationResult:
        """Aggregate activity records into athletes and teams.

        Parameters
        ----------
        records : Any
            Sequence of activity records (mappings or ``ActivityRecord``)

        Returns
        -------
        AggregationResult
            Fresh athlete and team aggregates, keyed by name in the order
            each was first seen

        Raises
        ------
        InvalidActivityPayload
            If ``records`` is not a collection; raised before any aggregate
            is created
        """
        activities, skipped = coerce_records(records)

        athletes: dict[str, AthleteAggregate] = {}
        teams: dict[str, TeamAggregate] = {}

        for activity in activities:
            athlete_name = activity.athlete_name or activity_identity(activity.athlete)
            team_name = (activity.athlete.team if activity.athlete else None) or NO_TEAM
            day_key = resolve_day_key(activity)
            distance = activity.distance

            athlete = athletes.get(athlete_name)
            if athlete is None:
                athlete = AthleteAggregate(
                    name=athlete_name, team=team_name, first_seen=len(athletes)
                )
                athletes[athlete_name] = athlete

            athlete_share = daily_cap.add(
                athlete.daily, day_key, distance, self.daily_cap_meters
            )
            athlete.activity_count += 1
            athlete.activities.append(activity)
            athlete.total_distance += athlete_share.added_to_raw
            athlete.capped_distance += athlete_share.added_to_capped

            team = teams.get(team_name)
            if team is None:
                team = TeamAggregate(name=team_name, first_seen=len(teams))
                teams[team_name] = team

            team_share = daily_cap.add(
                team.daily, (athlete_name, day_key), distance, self.daily_cap_meters
            )
            team.activity_count += 1
            team.activities.append(activity)
            team.members.add(athlete_name)
            team.total_distance += team_share.added_to_raw
            team.capped_distance += team_share.added_to_capped

        logger.debug(
            "Aggregated activities",
            activities=len(activities),
            skipped=skipped,
            athletes=len(athletes),
            teams=len(teams),
        )

        return AggregationResult(athletes=athletes, teams=teams, skipped=skipped)

    def aggregate_roster(
        self, roster: Any, athletes: Mapping[str, AthleteAggregate]
    ) -> list[MemberAggregate]:
        """Pair every roster member with its activity aggregate.

        Parameters
        ----------
        roster : Any
            Sequence of roster members (mappings or ``RosterMember``)
        athletes : Mapping[str, AthleteAggregate]
            Athlete aggregates from :meth:`aggregate`

        Returns
        -------
        list[MemberAggregate]
            One entry per roster member, in roster order. Members without a
            matching activity identity get an empty aggregate.
        """
        members = coerce_roster(roster)

        result: list[MemberAggregate] = []
        unmatched = 0
        for index, member in enumerate(members):
            display_name = resolve_name(member)
            matched_name = match_activity_to_member(None, athletes, member)

            if matched_name is None:
                unmatched += 1
                athlete = AthleteAggregate(
                    name=display_name, team=member.team or NO_TEAM, first_seen=index
                )
            else:
                athlete = athletes[matched_name]

            result.append(
                MemberAggregate(
                    name=display_name,
                    team=member.team or athlete.team,
                    first_seen=index,
                    athlete=athlete,
                    matched_name=matched_name,
                )
            )

        if unmatched:
            logger.info(
                "Roster members without activity", unmatched=unmatched, total=len(members)
            )
        return result
