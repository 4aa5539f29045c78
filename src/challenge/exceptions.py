"""Challenge computation exceptions."""


class ChallengeException(Exception):
    """Base exception for leaderboard computation errors."""

    pass


class InvalidActivityPayload(ChallengeException):
    """Raised when the activity collection is not a sequence of records.

    Raised before any record is processed, so no partial aggregates exist.
    """

    pass


class InvalidRosterPayload(ChallengeException):
    """Raised when the member roster is not a sequence of members."""

    pass
