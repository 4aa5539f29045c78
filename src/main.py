from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

import src.activities.client  # noqa: F401 - registers activities client lifespan
import src.core.logging_config  # noqa: F401 - registers logging lifespan
from src.challenge.router import router as leaderboard_router
from src.config import get_settings
from src.core.lifespan import manager
from src.core.logging_config import configure_logging
from src.core.middleware import LoggingMiddleware, RequestContextMiddleware
from src.core.request_context import get_request_id

# Configure logging FIRST (before app creation and settings access)
configure_logging()

settings = get_settings()

app_configs = {
    "title": settings.APP_NAME,
    "version": "1.0.0",
    "lifespan": manager,
}

if settings.ENVIRONMENT not in ("local", "staging"):
    app_configs["openapi_url"] = None

app = FastAPI(**app_configs)

# Add middleware (order matters - last added runs first)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)  # Must run before logging

if settings.CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(leaderboard_router)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled exceptions and return a 500 carrying the request id."""
    request_id = get_request_id()
    logger.opt(exception=exc).error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "request_id": request_id},
    )


@app.get("/health")
async def health():
    return {"status": "healthy"}
