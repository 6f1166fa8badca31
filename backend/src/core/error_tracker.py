"""In-process sink for failures that never reach a caller.

Background writes (history appends, memory upserts, subscription repairs)
report here instead of surfacing to the response path. The tracker keeps the
last MAX_ERRORS failures and summarizes them for the health endpoint.
"""

import logging
import threading
import time
from collections import deque
from typing import Any

logger = logging.getLogger(__name__)

MAX_ERRORS = 1000


class ErrorTracker:
    """Singleton that records and summarizes failures by operation/type.

    Stores up to MAX_ERRORS in memory (oldest evicted). Thread-safe.
    """

    _instance: "ErrorTracker | None" = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "ErrorTracker":
        """Return the singleton ErrorTracker instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def __init__(self) -> None:
        self._errors: deque[dict[str, Any]] = deque(maxlen=MAX_ERRORS)
        self._write_lock = threading.Lock()

    def record_error(
        self,
        operation: str,
        error_type: str,
        message: str,
        user_id: str | None = None,
    ) -> None:
        """Record a failure.

        Args:
            operation: What failed (e.g. "append_history", "api").
            error_type: Exception class name or error code.
            message: Human-readable error description (kept server-side).
            user_id: User the failed operation belonged to, if any.
        """
        entry = {
            "operation": operation,
            "error_type": error_type,
            "message": message,
            "user_id": user_id,
            "timestamp": time.time(),
        }
        with self._write_lock:
            self._errors.append(entry)

    def get_recent_errors(self, limit: int = 50) -> list[dict[str, Any]]:
        """Return the most recent failures, newest first."""
        with self._write_lock:
            items = list(self._errors)
        items.reverse()
        return items[:limit]

    def get_error_summary(self, period_seconds: int = 3600) -> dict[str, Any]:
        """Summarize failures within the given time window.

        Args:
            period_seconds: How far back to look (default 1 hour).

        Returns:
            Dict with total, by_operation, by_type counts and period_seconds.
        """
        cutoff = time.time() - period_seconds
        with self._write_lock:
            items = [entry for entry in self._errors if entry["timestamp"] >= cutoff]

        by_operation: dict[str, int] = {}
        by_type: dict[str, int] = {}
        for entry in items:
            by_operation[entry["operation"]] = by_operation.get(entry["operation"], 0) + 1
            by_type[entry["error_type"]] = by_type.get(entry["error_type"], 0) + 1

        return {
            "total": len(items),
            "by_operation": by_operation,
            "by_type": by_type,
            "period_seconds": period_seconds,
        }

    def reset(self) -> None:
        """Clear all tracked failures."""
        with self._write_lock:
            self._errors.clear()
