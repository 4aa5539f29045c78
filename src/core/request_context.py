"""Request-scoped context for log correlation.

The request id lives in a ``ContextVar`` so it follows the request through
async calls and is picked up by the loguru patcher without being passed
around explicitly.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context.

    Returns
    -------
    Optional[str]
        The current request ID, or None outside of a request
    """
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set the request ID in the current context.

    Parameters
    ----------
    request_id : str
        The request ID to set
    """
    request_id_var.set(request_id)


def generate_request_id() -> str:
    """Generate a new unique request ID (UUID v4)."""
    return str(uuid.uuid4())
