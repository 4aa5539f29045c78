"""
Unit tests for roster/activity identity reconciliation.
"""

from src.challenge.identity import (
    UNKNOWN_MEMBER,
    activity_identity,
    candidate_names,
    match_activity_to_member,
    resolve_name,
)
from src.challenge.schemas import AthleteRef, RosterMember


class TestResolveName:
    """Test display names for roster members."""

    def test_web_name_preferred(self):
        member = RosterMember(firstname="Ana", lastname="Lee", webName="Ana L.")
        assert resolve_name(member) == "Ana L."

    def test_blank_web_name_ignored(self):
        member = RosterMember(firstname="Ana", lastname="Lee", webName="  ")
        assert resolve_name(member) == "Ana Lee"

    def test_single_name_part_is_trimmed(self):
        assert resolve_name(RosterMember(firstname="Ana")) == "Ana"

    def test_no_names_is_unknown_member(self):
        assert resolve_name(RosterMember()) == UNKNOWN_MEMBER


class TestActivityIdentity:
    """Test the identity the feed assigns to an activity."""

    def test_first_and_last(self):
        assert activity_identity(AthleteRef(firstname="Ana", lastname="Lee")) == "Ana Lee"

    def test_missing_athlete_is_undefined_placeholder(self):
        assert activity_identity(None) == "undefined undefined"

    def test_missing_last_name(self):
        assert activity_identity(AthleteRef(firstname="Ana")) == "Ana undefined"


class TestMatchActivityToMember:
    """Test candidate priority and silent misses."""

    def test_activity_name_wins_over_display_name(self):
        activity = AthleteRef(firstname="Ana", lastname="Lee", webName="Ana L.")
        known = {"Ana Lee": 1, "Ana L.": 2}
        assert match_activity_to_member(activity, known) == "Ana Lee"

    def test_display_name_used_when_full_name_unknown(self):
        activity = AthleteRef(firstname="Anastasia", lastname="Lee", webName="Ana Lee")
        assert match_activity_to_member(activity, {"Ana Lee"}) == "Ana Lee"

    def test_roster_name_matches(self):
        member = RosterMember(firstname="Ana", lastname="Lee")
        assert match_activity_to_member(None, {"Ana Lee"}, member) == "Ana Lee"

    def test_swapped_roster_name_matches(self):
        """Roster entries with first/last reversed still find their activity."""
        member = RosterMember(firstname="Lee", lastname="Ana")
        assert match_activity_to_member(None, {"Ana Lee"}, member) == "Ana Lee"

    def test_no_match_returns_none(self):
        member = RosterMember(firstname="Bo", lastname="Kim")
        assert match_activity_to_member(None, {"Ana Lee"}, member) is None

    def test_candidates_are_unique_and_ordered(self):
        activity = AthleteRef(firstname="Ana", lastname="Lee", webName="Ana Lee")
        member = RosterMember(firstname="Ana", lastname="Lee")
        assert candidate_names(activity, member) == ["Ana Lee", "Lee Ana"]
