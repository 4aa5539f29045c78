"""Walking challenge leaderboard computation."""

from src.challenge.aggregator import ActivityAggregator, AggregationResult
from src.challenge.daily_cap import DAILY_CAP_METERS
from src.challenge.ranking import rank
from src.challenge.service import ChallengeService, challenge_service

__all__ = [
    "DAILY_CAP_METERS",
    "ActivityAggregator",
    "AggregationResult",
    "ChallengeService",
    "challenge_service",
    "rank",
]
