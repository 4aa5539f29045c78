"""Leaderboard ordering shared by athletes, teams and roster members."""

from typing import Iterable, Protocol, TypeVar

from pydantic import BaseModel

from src.challenge.schemas import RankingMetric

METRIC_FIELDS: dict[str, str] = {
    "capped": "capped_distance",
    "raw": "total_distance",
}

EntryT = TypeVar("EntryT", bound=BaseModel, covariant=True)


class Rankable(Protocol[EntryT]):
    total_distance: float
    capped_distance: float

    def to_entry(self, rank: int) -> EntryT: ...


def metric_field(metric: RankingMetric) -> str:
    """Aggregate attribute that backs ``metric``.

    Raises
    ------
    ValueError
        If ``metric`` is not "capped" or "raw"
    """
    try:
        return METRIC_FIELDS[metric]
    except KeyError:
        raise ValueError(
            f"Invalid metric: {metric}. Must be one of: {', '.join(METRIC_FIELDS)}"
        )


def rank(aggregates: Iterable[Rankable[EntryT]], metric: RankingMetric) -> list[EntryT]:
    """Order aggregates by ``metric`` and number them from 1.

    Parameters
    ----------
    aggregates : Iterable
        Aggregates in the order they were first seen
    metric : str
        "capped" for the official ranking, "raw" for total distance

    Returns
    -------
    list
        Leaderboard entries, best first. Ranks are exactly 1..N; entities
        with equal values keep their first-seen order.
    """
    field_name = metric_field(metric)

    # sorted() is stable, also with reverse=True
    ordered = sorted(
        aggregates, key=lambda aggregate: getattr(aggregate, field_name), reverse=True
    )
    return [aggregate.to_entry(position) for position, aggregate in enumerate(ordered, 1)]
