"""Pure functions for the daily distance cap.

No aggregation state beyond the bucket passed in, so the cap can be tested
independently of the aggregator.
"""

from dataclasses import dataclass, field
from typing import Hashable

DAILY_CAP_METERS = 10000


@dataclass
class DailyBucket:
    """Meters already counted per day, clamped at the cap.

    Keys are day keys for an athlete, or ``(athlete, day_key)`` tuples when
    one bucket tracks every member of a team.
    """

    days: dict[Hashable, float] = field(default_factory=dict)

    def get(self, key: Hashable) -> float:
        return self.days.get(key, 0.0)

    def __len__(self) -> int:
        return len(self.days)

    def __contains__(self, key: Hashable) -> bool:
        return key in self.days


@dataclass(frozen=True)
class CapContribution:
    """How much one activity added to the raw and the capped totals."""

    added_to_raw: float
    added_to_capped: float


def add(
    bucket: DailyBucket,
    key: Hashable,
    distance_meters: float,
    cap: float = DAILY_CAP_METERS,
) -> CapContribution:
    """Count an activity's distance against its day's cap.

    Parameters
    ----------
    bucket : DailyBucket
        Running per-day totals, updated in place
    key : Hashable
        Day key, or ``(athlete, day_key)`` for team buckets
    distance_meters : float
        Activity distance in meters (non-negative)
    cap : float
        Maximum meters counted per key

    Returns
    -------
    CapContribution
        The full distance as the raw contribution, and whatever still fit
        under the cap as the capped contribution

    Notes
    -----
    Once a day reaches the cap, later activities on that day add their full
    distance to the raw total and nothing to the capped total. The capped sum
    per key always ends at ``min(sum of distances, cap)``, whatever order the
    activities arrive in.
    """
    current = bucket.get(key)
    remaining_capacity = max(0.0, cap - current)
    capped_contribution = min(distance_meters, remaining_capacity)

    bucket.days[key] = min(current + distance_meters, cap)

    return CapContribution(
        added_to_raw=distance_meters, added_to_capped=capped_contribution
    )
