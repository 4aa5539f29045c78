"""
Shared fixtures for the challenge leaderboard tests.

Record factories build activity payloads shaped like the activities feed,
so tests read like the data they describe.
"""

from typing import Any, Optional

import pytest

from src.challenge.aggregator import ActivityAggregator
from src.challenge.service import ChallengeService


def make_record(
    firstname: Optional[str] = "Ana",
    lastname: Optional[str] = "Lee",
    team: Optional[str] = "Ducks",
    distance: Any = 1000,
    date: Optional[str] = "2025-09-01T07:00:00",
    **extra: Any,
) -> dict[str, Any]:
    """Activity record as the feed sends it."""
    athlete: dict[str, Any] = {}
    if firstname is not None:
        athlete["firstname"] = firstname
    if lastname is not None:
        athlete["lastname"] = lastname
    if team is not None:
        athlete["team"] = team

    record: dict[str, Any] = {"athlete": athlete, "distance": distance, **extra}
    if date is not None:
        record["date"] = date
    return record


@pytest.fixture
def record_factory():
    """Factory for feed-shaped activity records."""
    return make_record


@pytest.fixture
def aggregator() -> ActivityAggregator:
    """Aggregator with the standard 10km daily cap."""
    return ActivityAggregator()


@pytest.fixture
def service() -> ChallengeService:
    """Challenge service with the standard 10km daily cap."""
    return ChallengeService()
