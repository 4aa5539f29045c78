"""Pydantic schemas for activity input and leaderboard output."""

import math
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

RankingMetric = Literal["capped", "raw"]
ActivityLevel = Literal["High", "Medium", "Low"]


def _text_or_none(value: Any) -> Optional[str]:
    """Keep strings, stringify numbers, drop anything else to None."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


class AthleteRef(BaseModel):
    """Athlete attribution carried by an activity record.

    Attributes
    ----------
    firstname : str | None
        First name as sent by the activities feed
    lastname : str | None
        Last name as sent by the activities feed
    web_name : str | None
        Optional display name (``webName`` in the feed)
    team : str | None
        Team name; empty or missing means "No Team"
    """

    firstname: Optional[str] = None
    lastname: Optional[str] = None
    web_name: Optional[str] = Field(default=None, alias="webName")
    team: Optional[str] = None

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @field_validator("firstname", "lastname", "web_name", "team", mode="before")
    @classmethod
    def _drop_non_text(cls, value: Any) -> Optional[str]:
        return _text_or_none(value)


class ActivityRecord(BaseModel):
    """One logged walk/run as received from the activities feed.

    Attributes
    ----------
    athlete : AthleteRef | None
        Who logged the activity; may be missing entirely
    athlete_name : str | None
        Explicit identity, set when the feed already grouped activities
        per athlete
    distance : float
        Distance in meters; missing or unusable values become 0
    name : str | None
        Activity title
    type : str | None
        Activity type (Walk, Run, ...)
    moving_time : float | None
        Moving time in seconds
    date, date_committed, date_fetch : str | None
        Free-form timestamps, checked in that order
    daymonth : str | None
        Legacy precomputed ``MMDD`` day key
    """

    athlete: Optional[AthleteRef] = None
    athlete_name: Optional[str] = None
    distance: float = 0.0
    name: Optional[str] = None
    type: Optional[str] = None
    moving_time: Optional[float] = None
    date: Optional[str] = None
    date_committed: Optional[str] = None
    date_fetch: Optional[str] = None
    daymonth: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    @field_validator("athlete", mode="before")
    @classmethod
    def _drop_malformed_athlete(cls, value: Any) -> Any:
        if isinstance(value, (dict, AthleteRef)):
            return value
        return None

    @field_validator(
        "athlete_name",
        "name",
        "type",
        "date",
        "date_committed",
        "date_fetch",
        "daymonth",
        mode="before",
    )
    @classmethod
    def _drop_non_text(cls, value: Any) -> Optional[str]:
        return _text_or_none(value)

    @field_validator("distance", mode="before")
    @classmethod
    def _coerce_distance(cls, value: Any) -> float:
        if value is None or isinstance(value, bool):
            return 0.0
        try:
            distance = float(value)
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(distance) or distance < 0:
            return 0.0
        return distance

    @field_validator("moving_time", mode="before")
    @classmethod
    def _coerce_moving_time(cls, value: Any) -> Optional[float]:
        try:
            return float(value) if value is not None else None
        except (TypeError, ValueError):
            return None


class RosterMember(BaseModel):
    """Registered challenge member from the roster feed.

    Attributes
    ----------
    firstname : str | None
        First name as registered
    lastname : str | None
        Last name as registered
    web_name : str | None
        Display name (``webName``), preferred when present
    team : str | None
        Team the member signed up for
    """

    firstname: Optional[str] = None
    lastname: Optional[str] = None
    web_name: Optional[str] = Field(default=None, alias="webName")
    team: Optional[str] = None

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @field_validator("firstname", "lastname", "web_name", "team", mode="before")
    @classmethod
    def _drop_non_text(cls, value: Any) -> Optional[str]:
        return _text_or_none(value)


class AthleteGroup(BaseModel):
    """Activities already grouped per athlete (weekly challenge feed)."""

    athlete_name: str
    team: Optional[str] = None
    activities: list[dict[str, Any]] = []

    @field_validator("team", mode="before")
    @classmethod
    def _drop_non_text(cls, value: Any) -> Optional[str]:
        return _text_or_none(value)


class AthleteLeaderboardEntry(BaseModel):
    """Single athlete row in a leaderboard.

    Attributes
    ----------
    rank : int
        1-based position in the ordering
    name : str
        Athlete identity
    team : str
        Team the athlete's first activity was logged under
    activity_count : int
        Number of activities
    total_distance : float
        Uncapped distance in meters
    capped_distance : float
        Distance in meters after the daily cap
    total_distance_km : float
        Uncapped distance in kilometers (not rounded)
    capped_distance_km : float
        Capped distance in kilometers (not rounded)
    average_distance : float
        Mean meters per activity (0 when there are no activities)
    best_activity_distance : float
        Longest single activity in meters
    days_active : int
        Number of distinct day keys with activity
    """

    rank: int
    name: str
    team: str
    activity_count: int
    total_distance: float
    capped_distance: float
    total_distance_km: float
    capped_distance_km: float
    average_distance: float
    best_activity_distance: float
    days_active: int


class MemberLeaderboardEntry(AthleteLeaderboardEntry):
    """Roster-driven athlete row.

    Attributes
    ----------
    matched_name : str | None
        Activity identity the roster entry was reconciled with, or None
    activity_level : str
        "High" (10+ activities), "Medium" (5+) or "Low"
    """

    matched_name: Optional[str] = None
    activity_level: ActivityLevel = "Low"


class TeamLeaderboardEntry(BaseModel):
    """Single team row in a leaderboard.

    Attributes
    ----------
    rank : int
        1-based position in the ordering
    name : str
        Team name
    activity_count : int
        Number of activities logged by members
    member_count : int
        Distinct athletes who logged activity for the team
    total_distance : float
        Uncapped distance in meters
    capped_distance : float
        Sum of members' individually capped distances in meters
    total_distance_km : float
        Uncapped distance in kilometers
    capped_distance_km : float
        Capped distance in kilometers
    average_distance : float
        Mean meters per activity
    average_distance_per_member : float
        Uncapped meters per distinct member
    average_capped_distance_per_member : float
        Capped meters per distinct member
    """

    rank: int
    name: str
    activity_count: int
    member_count: int
    total_distance: float
    capped_distance: float
    total_distance_km: float
    capped_distance_km: float
    average_distance: float
    average_distance_per_member: float
    average_capped_distance_per_member: float


class ChallengeSummary(BaseModel):
    """Headline numbers across the whole activity set."""

    total_activities: int
    total_distance: float
    total_capped_distance: float
    total_athletes: int
    total_teams: int
    average_distance_per_athlete: float


class ChallengeLeaderboards(BaseModel):
    """Athlete and team leaderboards computed from one activity set."""

    metric: RankingMetric
    athletes: list[AthleteLeaderboardEntry]
    teams: list[TeamLeaderboardEntry]
    summary: ChallengeSummary


class MemberLeaderboardRequest(BaseModel):
    """Body for the roster-driven member leaderboard.

    Both fields are checked by the aggregator, which skips elements that are
    not records instead of rejecting the whole request.
    """

    roster: Any = Field(..., description="List of roster members")
    activities: Any = Field(..., description="List of activity records")
