"""Tests for declared write policies and background write dispatch."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.core.error_tracker import ErrorTracker
from src.core.exceptions import DatabaseError
from src.core.write_policy import (
    WRITE_POLICIES,
    WritePolicy,
    dispatch_write,
    drain_background_writes,
    pending_writes,
    policy_for,
)


def test_declared_policies() -> None:
    """Only user creation is critical; the rest are best-effort."""
    assert policy_for("create_user") is WritePolicy.CRITICAL
    assert policy_for("append_history") is WritePolicy.BEST_EFFORT
    assert policy_for("upsert_memory") is WritePolicy.BEST_EFFORT
    assert policy_for("upsert_free_subscription") is WritePolicy.BEST_EFFORT


def test_undeclared_operation_is_rejected() -> None:
    assert "drop_everything" not in WRITE_POLICIES
    with pytest.raises(KeyError):
        policy_for("drop_everything")


@pytest.mark.asyncio
async def test_critical_write_is_awaited_and_returns_result() -> None:
    write = AsyncMock(return_value={"id": "u1"})

    result = await dispatch_write("create_user", write)

    assert result == {"id": "u1"}
    write.assert_awaited_once()
    assert pending_writes() == 0


@pytest.mark.asyncio
async def test_critical_write_failure_propagates() -> None:
    write = AsyncMock(side_effect=DatabaseError("insert failed"))

    with pytest.raises(DatabaseError):
        await dispatch_write("create_user", write)

    assert ErrorTracker.get_instance().get_error_summary()["total"] == 0


@pytest.mark.asyncio
async def test_best_effort_write_is_not_awaited_by_caller() -> None:
    """The caller returns before the background write runs."""
    started = asyncio.Event()
    release = asyncio.Event()

    async def slow_write() -> None:
        started.set()
        await release.wait()

    result = await dispatch_write("append_history", slow_write)

    assert result is None
    assert pending_writes() == 1
    release.set()
    await drain_background_writes()
    assert started.is_set()
    assert pending_writes() == 0


@pytest.mark.asyncio
async def test_best_effort_failure_is_recorded_not_raised() -> None:
    write = AsyncMock(side_effect=DatabaseError("insert failed"))

    await dispatch_write("append_history", write, user_id="u1")
    await drain_background_writes()

    (entry,) = ErrorTracker.get_instance().get_recent_errors()
    assert entry["operation"] == "append_history"
    assert entry["error_type"] == "DatabaseError"
    assert entry["user_id"] == "u1"


@pytest.mark.asyncio
async def test_best_effort_success_records_nothing() -> None:
    await dispatch_write("upsert_memory", AsyncMock(return_value=None))
    await drain_background_writes()

    assert ErrorTracker.get_instance().get_error_summary()["total"] == 0


@pytest.mark.asyncio
async def test_drain_with_nothing_pending() -> None:
    await drain_background_writes()
    assert pending_writes() == 0
