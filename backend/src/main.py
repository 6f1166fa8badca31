"""Startup Setu API - Main FastAPI Application."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import auth, chat, health
from src.core.error_tracker import ErrorTracker
from src.core.exceptions import SetuException
from src.core.write_policy import drain_background_writes
from src.middleware.performance import (
    RequestIDMiddleware,
    RequestTimingMiddleware,
    get_request_id,
)

SHUTDOWN_DRAIN_TIMEOUT_SECONDS = 10.0


# Configure logging: JSON for production, text for dev
def _configure_logging() -> None:
    """Set up logging based on LOG_FORMAT env var.

    json: Structured JSON via python-json-logger.
    text: Human-readable format (for local development).
    """
    log_format = os.environ.get("LOG_FORMAT", "text").lower()
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Remove existing handlers to avoid duplicate output
    root_logger.handlers.clear()

    handler = logging.StreamHandler()

    if log_format == "json":
        from pythonjsonlogger.json import JsonFormatter

        formatter = JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "logger",
            },
            static_fields={"app": "startup-setu-api"},
        )
        handler.setFormatter(formatter)
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)


_configure_logging()
logger = logging.getLogger(__name__)


def get_cors_origins() -> list[str]:
    """Get CORS origins from settings, falling back to any origin."""
    from src.core.config import settings

    return settings.cors_origins_list or ["*"]


@asynccontextmanager
async def lifespan(_app: FastAPI) -> Any:
    """Application lifespan handler for startup and shutdown events."""
    from src.core.config import settings

    logger.info(
        "Starting Startup Setu API (env=%s, model=%s)",
        settings.APP_ENV,
        settings.completion_model,
    )
    yield
    logger.info("Shutting down Startup Setu API...")
    await drain_background_writes(timeout=SHUTDOWN_DRAIN_TIMEOUT_SECONDS)


app = FastAPI(
    title="Startup Setu API",
    description="Agent-routed startup advisory chat backend",
    version="1.0.0",
    lifespan=lifespan,
)

CORS_ORIGINS = get_cors_origins()
logger.info("CORS allowed origins: %s", CORS_ORIGINS)

# In Starlette, last-added = outermost, so add timing first, then ID.
app.add_middleware(RequestTimingMiddleware)
app.add_middleware(RequestIDMiddleware)

# CORS Configuration, added last so it is outermost (handles preflight first)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api")
app.include_router(chat.router, prefix="/api")
app.include_router(health.router)


@app.get("/", tags=["system"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "name": "Startup Setu API",
        "version": "1.0.0",
    }


@app.exception_handler(SetuException)
async def setu_exception_handler(request: Request, exc: SetuException) -> JSONResponse:
    """Handle application exceptions with a consistent error body.

    Server-side failures are reported with a generic message; the detail
    stays in the logs.
    """
    request_id = get_request_id(request)
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed: %s",
        exc.message,
        extra={
            "code": exc.code,
            "status_code": exc.status_code,
            "request_id": request_id,
            "path": request.url.path,
        },
    )
    if exc.status_code >= 500:
        ErrorTracker.get_instance().record_error(
            operation="api",
            error_type=exc.code,
            message=f"{request.method} {request.url.path}: {exc.message}",
        )
    content: dict[str, Any] = {
        "error": exc.public_message,
        "code": exc.code,
        "request_id": request_id,
    }
    errors = getattr(exc, "errors", None)
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed request bodies and query parameters."""
    request_id = get_request_id(request)
    errors = [
        f"{'.'.join(str(part) for part in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
        for err in exc.errors()
    ]
    logger.warning(
        "Request validation error",
        extra={"request_id": request_id, "path": request.url.path, "errors": errors},
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": "; ".join(errors) or "Invalid request",
            "code": "REQUEST_VALIDATION_ERROR",
            "request_id": request_id,
            "errors": errors,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions with a generic 500."""
    request_id = get_request_id(request)
    logger.exception(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={"request_id": request_id, "path": request.url.path},
    )
    ErrorTracker.get_instance().record_error(
        operation="api",
        error_type=type(exc).__name__,
        message=f"{request.method} {request.url.path}: {exc}",
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "code": "INTERNAL_ERROR",
            "request_id": request_id,
        },
    )
