"""Tests for the SupabaseClient persistence gateway."""

from unittest.mock import MagicMock, patch

import pytest

from src.core.exceptions import DatabaseError
from src.db.supabase import SupabaseClient

_BUILDER_METHODS = ("select", "eq", "order", "limit", "single", "maybe_single", "insert", "upsert")


def _mock_client(data=None, error: Exception | None = None) -> tuple[MagicMock, MagicMock]:
    """Client whose query builder chains back to itself."""
    query = MagicMock()
    for name in _BUILDER_METHODS:
        getattr(query, name).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data)
    client = MagicMock()
    client.table.return_value = query
    return client, query


@pytest.fixture
def patch_client():
    def _patch(data=None, error: Exception | None = None):
        client, query = _mock_client(data, error)
        patcher = patch.object(SupabaseClient, "get_client", return_value=client)
        patcher.start()
        patchers.append(patcher)
        return client, query

    patchers: list = []
    yield _patch
    for patcher in patchers:
        patcher.stop()


class TestUsers:
    @pytest.mark.asyncio
    async def test_get_user_by_email_returns_row(self, patch_client):
        client, query = patch_client({"id": "u1", "email": "a@b.co", "password_hash": "h"})

        user = await SupabaseClient.get_user_by_email("a@b.co")

        assert user["id"] == "u1"
        client.table.assert_called_with("users")
        query.eq.assert_called_with("email", "a@b.co")

    @pytest.mark.asyncio
    async def test_get_user_by_email_no_rows_is_none(self, patch_client):
        patch_client(error=Exception("{'code': 'PGRST116', 'message': 'no rows'}"))

        assert await SupabaseClient.get_user_by_email("a@b.co") is None

    @pytest.mark.asyncio
    async def test_get_user_by_email_failure_raises(self, patch_client):
        patch_client(error=Exception("connection refused"))

        with pytest.raises(DatabaseError):
            await SupabaseClient.get_user_by_email("a@b.co")

    @pytest.mark.asyncio
    async def test_create_user_inserts_hash(self, patch_client):
        _, query = patch_client([{"id": "u1", "email": "a@b.co"}])

        row = await SupabaseClient.create_user("u1", "a@b.co", "hash")

        assert row == {"id": "u1", "email": "a@b.co"}
        query.insert.assert_called_once_with(
            {"id": "u1", "email": "a@b.co", "password_hash": "hash"}
        )

    @pytest.mark.asyncio
    async def test_create_user_without_returned_row_raises(self, patch_client):
        patch_client([])

        with pytest.raises(DatabaseError):
            await SupabaseClient.create_user("u1", "a@b.co", "hash")


class TestLookups:
    @pytest.mark.asyncio
    async def test_missing_subscription_is_none(self, patch_client):
        patch_client(None)

        assert await SupabaseClient.get_subscription("u1", "hr-solutions") is None

    @pytest.mark.asyncio
    async def test_maybe_single_returning_none_response(self, patch_client):
        _, query = patch_client()
        query.execute.return_value = None

        assert await SupabaseClient.get_memory("u1") is None
        assert await SupabaseClient.get_agent_access("u1", "Some Agent") is None

    @pytest.mark.asyncio
    async def test_lookup_failure_is_database_error(self, patch_client):
        patch_client(error=Exception("timeout"))

        with pytest.raises(DatabaseError):
            await SupabaseClient.get_subscription("u1", "hr-solutions")
        with pytest.raises(DatabaseError):
            await SupabaseClient.get_memory("u1")
        with pytest.raises(DatabaseError):
            await SupabaseClient.list_subscriptions("u1")

    @pytest.mark.asyncio
    async def test_list_subscriptions_empty(self, patch_client):
        patch_client(None)

        assert await SupabaseClient.list_subscriptions("u1") == []


class TestWrites:
    @pytest.mark.asyncio
    async def test_free_subscription_is_active_upsert(self, patch_client):
        client, query = patch_client([])

        await SupabaseClient.upsert_free_subscription("u1", "business-blueprinting")

        client.table.assert_called_with("subscriptions")
        query.upsert.assert_called_once_with(
            {"user_id": "u1", "agent_id": "business-blueprinting", "is_active": True}
        )

    @pytest.mark.asyncio
    async def test_upsert_memory_sends_only_given_fields(self, patch_client):
        _, query = patch_client([])

        await SupabaseClient.upsert_memory("u1", {"industry": "retail"})

        record = query.upsert.call_args.args[0]
        assert set(record) == {"industry", "user_id", "updated_at"}
        assert record["industry"] == "retail"
        assert record["user_id"] == "u1"

    @pytest.mark.asyncio
    async def test_append_history_row(self, patch_client):
        client, query = patch_client([])

        await SupabaseClient.append_history("u1", "hr-solutions", "hi", "hello")

        client.table.assert_called_with("chat_history")
        query.insert.assert_called_once_with(
            {
                "user_id": "u1",
                "agent_name": "hr-solutions",
                "user_message": "hi",
                "ai_reply": "hello",
            }
        )

    @pytest.mark.asyncio
    async def test_write_failure_is_database_error(self, patch_client):
        patch_client(error=Exception("insert failed"))

        with pytest.raises(DatabaseError):
            await SupabaseClient.append_history("u1", "hr-solutions", "hi", "hello")


class TestHistory:
    @pytest.mark.asyncio
    async def test_recent_history_is_returned_oldest_first(self, patch_client):
        _, query = patch_client(
            [
                {"user_message": "q3", "ai_reply": "a3", "created_at": "2024-01-03T00:00:00Z"},
                {"user_message": "q2", "ai_reply": "a2", "created_at": "2024-01-02T00:00:00Z"},
                {"user_message": "q1", "ai_reply": "a1", "created_at": "2024-01-01T00:00:00Z"},
            ]
        )

        rows = await SupabaseClient.get_recent_history("u1", "hr-solutions", limit=3)

        assert [row["user_message"] for row in rows] == ["q1", "q2", "q3"]
        query.order.assert_called_once_with("created_at", desc=True)
        query.limit.assert_called_once_with(3)

    @pytest.mark.asyncio
    async def test_full_history_is_chronological(self, patch_client):
        patch_client(
            [
                {"user_message": "q2", "ai_reply": "a2", "created_at": "2024-01-02T00:00:00Z"},
                {"user_message": "q1", "ai_reply": "a1", "created_at": "2024-01-01T00:00:00Z"},
            ]
        )

        rows = await SupabaseClient.get_history("u1", "hr-solutions")

        assert [row["user_message"] for row in rows] == ["q1", "q2"]


def test_db_package_exposes_only_the_gateway() -> None:
    import src.db

    assert src.db.__all__ == ["SupabaseClient"]
    assert src.db.SupabaseClient is SupabaseClient
