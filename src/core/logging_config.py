"""Logging configuration using loguru.

Local runs get colorized console output with source locations; every other
environment emits one JSON object per line so leaderboard runs can be traced
by request id in the log aggregator.

Standard library logging (uvicorn, httpx) is intercepted and routed to loguru.
"""

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

from loguru import logger

from src.config import get_settings
from src.core.lifespan import manager
from src.core.request_context import get_request_id


def _attach_request_id(record) -> None:
    """Copy the current request id into the record's extra fields."""
    request_id = get_request_id()
    if request_id is not None:
        record["extra"].setdefault("request_id", request_id)


def sink_serializer(message):
    """Serialize a loguru record to a single JSON line on stderr."""
    record = message.record
    subset = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
        "message": record["message"],
    }

    for key, value in record["extra"].items():
        if not key.startswith("_"):
            subset[key] = value

    if record["exception"]:
        exc_type, exc_value, _ = record["exception"]
        subset["exception"] = {
            "type": exc_type.__name__ if exc_type else None,
            "value": str(exc_value),
        }

    print(json.dumps(subset, default=str), file=sys.stderr)


class InterceptHandler(logging.Handler):
    """Handler that intercepts standard logging and routes to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging() -> None:
    """Configure loguru logger based on environment settings.

    Removes the default handler and installs either a colorized console
    handler (``ENVIRONMENT=local``) or the JSON sink, then routes the
    standard library loggers through :class:`InterceptHandler`.
    """
    settings = get_settings()

    logger.remove()
    logger.configure(patcher=_attach_request_id)

    if settings.ENVIRONMENT == "local":
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level> {extra}"
            ),
            level=settings.LOG_LEVEL,
            colorize=True,
        )
    else:
        logger.add(sink_serializer, level=settings.LOG_LEVEL)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@manager.add
@asynccontextmanager
async def logging_lifespan() -> AsyncIterator[dict]:
    """Log application startup and shutdown events."""
    settings = get_settings()

    logger.info(
        "Application starting",
        app_name=settings.APP_NAME,
        environment=settings.ENVIRONMENT,
        log_level=settings.LOG_LEVEL,
        daily_cap_meters=settings.DAILY_CAP_METERS,
    )

    yield {}

    logger.info("Application shutting down")
