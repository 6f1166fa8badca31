"""Declared durability policy for every persistence write.

A CRITICAL write is awaited and its failure propagates to the caller. A
BEST_EFFORT write is scheduled as a background task that the response path
never awaits; its failure is logged and recorded in the ErrorTracker.

Usage:
    await dispatch_write("append_history", lambda: SupabaseClient.append_history(...))
"""

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from src.core.error_tracker import ErrorTracker

logger = logging.getLogger(__name__)


class WritePolicy(enum.Enum):
    """How a write's failure is handled."""

    CRITICAL = "critical"
    BEST_EFFORT = "best_effort"


WRITE_POLICIES: dict[str, WritePolicy] = {
    "create_user": WritePolicy.CRITICAL,
    "upsert_free_subscription": WritePolicy.BEST_EFFORT,
    "append_history": WritePolicy.BEST_EFFORT,
    "upsert_memory": WritePolicy.BEST_EFFORT,
}

# Strong references so pending tasks are not garbage-collected mid-flight
_background_tasks: set[asyncio.Task[Any]] = set()


def policy_for(operation: str) -> WritePolicy:
    """Look up the declared policy for a write operation.

    Raises:
        KeyError: If the operation has no declared policy.
    """
    return WRITE_POLICIES[operation]


def _on_background_done(operation: str, user_id: str | None, task: asyncio.Task[Any]) -> None:
    _background_tasks.discard(task)
    if task.cancelled():
        logger.warning("Background write cancelled", extra={"operation": operation})
        return
    exc = task.exception()
    if exc is None:
        return
    logger.warning(
        "Background write failed: %s",
        operation,
        exc_info=exc,
        extra={"operation": operation, "user_id": user_id},
    )
    ErrorTracker.get_instance().record_error(
        operation=operation,
        error_type=type(exc).__name__,
        message=str(exc),
        user_id=user_id,
    )


async def dispatch_write(
    operation: str,
    write: Callable[[], Awaitable[Any]],
    *,
    user_id: str | None = None,
) -> Any:
    """Run a write according to its declared policy.

    Args:
        operation: Name of the write, looked up in WRITE_POLICIES.
        write: Zero-argument callable returning the awaitable to run.
        user_id: Owner of the write, for logs and the error sink.

    Returns:
        The write's result for CRITICAL writes; None for BEST_EFFORT writes.
    """
    if policy_for(operation) is WritePolicy.CRITICAL:
        return await write()

    task = asyncio.ensure_future(write())
    _background_tasks.add(task)
    task.add_done_callback(lambda t: _on_background_done(operation, user_id, t))
    return None


def pending_writes() -> int:
    """Number of background writes still in flight."""
    return len(_background_tasks)


async def drain_background_writes(timeout: float | None = None) -> None:
    """Wait for in-flight background writes (used on shutdown and in tests)."""
    if not _background_tasks:
        return
    tasks = list(_background_tasks)
    done, pending = await asyncio.wait(tasks, timeout=timeout)
    if pending:
        logger.warning("%d background writes still pending after drain", len(pending))
    # Let done-callbacks run before returning
    await asyncio.sleep(0)
