"""FastAPI middleware for request context and logging.

RequestContextMiddleware must wrap LoggingMiddleware so the request id is set
before the first log line:

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestContextMiddleware)  # added last, runs first
"""

import time

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.core.request_context import generate_request_id, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Paths that are polled often and not worth a log line
QUIET_PATHS = frozenset({"/health"})


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a request id to the context and echo it in the response.

    An incoming ``X-Request-ID`` header is reused so callers can correlate
    their own logs with ours; otherwise a fresh UUID is generated.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its status code and duration.

    Request bodies are not logged: activity payloads can be large, so only
    the declared content length is recorded.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query_params=str(request.query_params),
            content_length=request.headers.get("content-length"),
            client_ip=request.client.host if request.client else None,
        )

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        return response
