"""Health check API routes.

Provides:
- GET /health: liveness, no dependency checks
- GET /health/errors: counts of recent background-write failures
"""

import logging
from typing import Any

from fastapi import APIRouter, status

from src.core.error_tracker import ErrorTracker
from src.core.write_policy import pending_writes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """Liveness check; returns 200 while the process is running."""
    return {"status": "ok"}


@router.get("/errors", status_code=status.HTTP_200_OK)
async def error_summary(period_seconds: int = 3600) -> dict[str, Any]:
    """Summarize failures recorded in the error sink.

    Only counts are exposed; messages stay server-side.
    """
    summary = ErrorTracker.get_instance().get_error_summary(period_seconds=period_seconds)
    summary["pending_background_writes"] = pending_writes()
    return summary
