"""
Unit tests for leaderboard ranking.
"""

import pytest

from src.challenge.ranking import rank
from tests.conftest import make_record


class TestRank:
    """Test ordering and rank assignment."""

    def test_ties_keep_first_seen_order(self, aggregator):
        """Capped totals 5000, 7000, 7000 rank as 3, 1, 2."""
        records = [
            make_record("Ana", "Lee", distance=5000),
            make_record("Bo", "Kim", distance=7000),
            make_record("Cy", "Roe", distance=7000),
        ]
        result = aggregator.aggregate(records)
        entries = rank(result.athletes.values(), "capped")

        ranks = {entry.name: entry.rank for entry in entries}
        assert ranks == {"Ana Lee": 3, "Bo Kim": 1, "Cy Roe": 2}

    def test_metric_changes_order(self, aggregator):
        records = [
            make_record("Ana", "Lee", distance=9000, date="2025-09-01"),
            make_record("Ana", "Lee", distance=9000, date="2025-09-01"),
            make_record("Bo", "Kim", distance=8000, date="2025-09-01"),
            make_record("Bo", "Kim", distance=8000, date="2025-09-02"),
        ]
        result = aggregator.aggregate(records)

        by_capped = rank(result.athletes.values(), "capped")
        by_raw = rank(result.athletes.values(), "raw")

        assert [e.name for e in by_capped] == ["Bo Kim", "Ana Lee"]
        assert [e.name for e in by_raw] == ["Ana Lee", "Bo Kim"]

    def test_ranks_are_contiguous(self, aggregator):
        records = [
            make_record(f"Walker{i}", "Test", distance=(i % 3) * 1000)
            for i in range(7)
        ]
        entries = rank(aggregator.aggregate(records).athletes.values(), "capped")
        assert [entry.rank for entry in entries] == list(range(1, 8))

    def test_team_entries(self, aggregator):
        records = [
            make_record("Ana", "Lee", "Ducks", 3000),
            make_record("Bo", "Kim", "Gooses", 6000),
        ]
        entries = rank(aggregator.aggregate(records).teams.values(), "capped")
        assert [(e.rank, e.name) for e in entries] == [(1, "Gooses"), (2, "Ducks")]
        assert entries[0].capped_distance_km == 6

    def test_empty(self):
        assert rank([], "capped") == []

    def test_invalid_metric(self):
        with pytest.raises(ValueError, match="Invalid metric"):
            rank([], "points")
