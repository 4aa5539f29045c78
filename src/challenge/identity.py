"""Athlete identity reconciliation between the roster and the activities feed.

The roster and the activities feed are maintained separately and do not share
an athlete id, so the only link between them is the name string. Matching is
best effort: a roster member whose spelling differs from every activity simply
ends up with no activity.
"""

from typing import Collection, Optional

from src.challenge.schemas import AthleteRef, RosterMember

UNKNOWN_MEMBER = "Unknown Member"

# Rendered for a missing name part, matching the feed's historical identities
MISSING_NAME_PART = "undefined"


def _combined(first: Optional[str], last: Optional[str]) -> str:
    return " ".join(part for part in (first, last) if part).strip()


def resolve_name(member: RosterMember) -> str:
    """Display name for a roster member.

    Parameters
    ----------
    member : RosterMember
        Roster entry

    Returns
    -------
    str
        ``webName`` when set, else "first last", else ``UNKNOWN_MEMBER``
    """
    if member.web_name and member.web_name.strip():
        return member.web_name.strip()
    return _combined(member.firstname, member.lastname) or UNKNOWN_MEMBER


def activity_identity(athlete: Optional[AthleteRef]) -> str:
    """Identity the activities feed uses for an athlete.

    Missing parts are rendered as ``"undefined"``, so an activity without an
    athlete is attributed to ``"undefined undefined"``. Dashboards already key
    on that placeholder.
    """
    if athlete is None:
        return f"{MISSING_NAME_PART} {MISSING_NAME_PART}"

    first = MISSING_NAME_PART if athlete.firstname is None else athlete.firstname
    last = MISSING_NAME_PART if athlete.lastname is None else athlete.lastname
    return f"{first} {last}"


def candidate_names(
    activity: Optional[AthleteRef] = None, member: Optional[RosterMember] = None
) -> list[str]:
    """Names to try, in priority order, when looking up an aggregate."""
    candidates: list[str] = []
    if activity is not None:
        candidates.append(_combined(activity.firstname, activity.lastname))
        candidates.append((activity.web_name or "").strip())
    if member is not None:
        candidates.append(_combined(member.firstname, member.lastname))
        candidates.append(_combined(member.lastname, member.firstname))

    unique: list[str] = []
    for name in candidates:
        if name and name not in unique:
            unique.append(name)
    return unique


def match_activity_to_member(
    activity: Optional[AthleteRef],
    known_names: Collection[str],
    member: Optional[RosterMember] = None,
) -> Optional[str]:
    """Find the aggregate name an activity athlete or roster member maps to.

    Tries the activity's "first last", the activity's display name, the
    roster member's "first last" and finally the roster member's "last first".

    Parameters
    ----------
    activity : AthleteRef | None
        Athlete attribution from an activity record
    known_names : Collection[str]
        Names that already have an aggregate
    member : RosterMember | None
        Roster entry being reconciled

    Returns
    -------
    str | None
        First candidate present in ``known_names``, or None when nothing
        matches
    """
    for name in candidate_names(activity, member):
        if name in known_names:
            return name
    return None
