"""Activities API exceptions."""


class ActivitiesApiError(Exception):
    """Base exception for activities feed errors."""

    pass


class ActivitiesNotFound(ActivitiesApiError):
    """Raised when the requested feed or period does not exist (404)."""

    pass


class RateLimitExceeded(ActivitiesApiError):
    """Raised when the feed rejects us for sending too many requests (429)."""

    pass
