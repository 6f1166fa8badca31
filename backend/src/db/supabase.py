"""Supabase client module for database operations.

SupabaseClient is the only code that talks to the database. Lookups that
find no row return None (or an empty list); every other client failure is
raised as DatabaseError so callers can tell "absent" from "unavailable".
"""

import logging
from datetime import UTC, datetime
from typing import Any, cast

from src.core.config import settings
from src.core.exceptions import DatabaseError
from supabase import Client, create_client

logger = logging.getLogger(__name__)

# PostgREST code for ".single() matched zero rows"
_NO_ROWS_CODE = "PGRST116"


def _is_no_rows(error: Exception) -> bool:
    return _NO_ROWS_CODE in str(error)


def _chronological(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Order history rows oldest-first by ``created_at``."""
    return sorted(rows, key=lambda row: row.get("created_at") or "")


class SupabaseClient:
    """Singleton Supabase client for backend operations."""

    _client: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """Get or create the Supabase client singleton.

        Returns:
            Initialized Supabase client.

        Raises:
            DatabaseError: If client initialization fails.
        """
        if cls._client is None:
            try:
                cls._client = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_ROLE_KEY.get_secret_value(),
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                logger.exception("Failed to initialize Supabase client")
                raise DatabaseError(f"Failed to initialize database connection: {e}") from e
        return cls._client

    @classmethod
    def reset_client(cls) -> None:
        """Reset the client singleton (useful for testing)."""
        cls._client = None

    # ====================
    # Users
    # ====================

    @classmethod
    async def get_user_by_email(cls, email: str) -> dict[str, Any] | None:
        """Fetch a user by email.

        Args:
            email: Email exactly as stored.

        Returns:
            User row (id, email, password_hash) or None if no user has it.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            client = cls.get_client()
            response = (
                client.table("users")
                .select("id, email, password_hash")
                .eq("email", email)
                .single()
                .execute()
            )
            if response.data is None:
                return None
            return cast(dict[str, Any], response.data)
        except DatabaseError:
            raise
        except Exception as e:
            if _is_no_rows(e):
                return None
            logger.exception("Error fetching user by email")
            raise DatabaseError(f"Failed to fetch user: {e}") from e

    @classmethod
    async def create_user(
        cls,
        user_id: str,
        email: str,
        password_hash: str | None = None,
    ) -> dict[str, Any]:
        """Create a new user.

        Args:
            user_id: Generated UUID for the user.
            email: User's email.
            password_hash: bcrypt hash of the user's password.

        Returns:
            Created user row.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            client = cls.get_client()
            data: dict[str, Any] = {"id": user_id, "email": email}
            if password_hash is not None:
                data["password_hash"] = password_hash
            response = client.table("users").insert(data).execute()
            if response.data and len(response.data) > 0:
                return cast(dict[str, Any], response.data[0])
            raise DatabaseError("Failed to create user")
        except DatabaseError:
            raise
        except Exception as e:
            logger.exception("Error creating user", extra={"user_id": user_id})
            raise DatabaseError(f"Failed to create user: {e}") from e

    # ====================
    # Subscriptions and agent access
    # ====================

    @classmethod
    async def upsert_free_subscription(cls, user_id: str, agent_id: str) -> None:
        """Grant (or re-grant) the free agent as an active subscription.

        Idempotent: (user_id, agent_id) is the table's primary key.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            client = cls.get_client()
            client.table("subscriptions").upsert(
                {"user_id": user_id, "agent_id": agent_id, "is_active": True}
            ).execute()
        except Exception as e:
            raise DatabaseError(f"Failed to upsert free subscription: {e}") from e

    @classmethod
    async def get_subscription(cls, user_id: str, agent_id: str) -> dict[str, Any] | None:
        """Fetch the subscription row for one agent.

        Returns:
            Row with ``is_active`` or None if the user has no row for the agent.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            client = cls.get_client()
            response = (
                client.table("subscriptions")
                .select("agent_id, is_active")
                .eq("user_id", user_id)
                .eq("agent_id", agent_id)
                .maybe_single()
                .execute()
            )
            if response is None or response.data is None:
                return None
            return cast(dict[str, Any], response.data)
        except Exception as e:
            raise DatabaseError(f"Failed to fetch subscription: {e}") from e

    @classmethod
    async def list_subscriptions(cls, user_id: str) -> list[dict[str, Any]]:
        """Fetch every subscription row for a user.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            client = cls.get_client()
            response = (
                client.table("subscriptions")
                .select("agent_id, is_active")
                .eq("user_id", user_id)
                .execute()
            )
            return cast(list[dict[str, Any]], response.data or [])
        except Exception as e:
            raise DatabaseError(f"Failed to fetch subscriptions: {e}") from e

    @classmethod
    async def get_agent_access(cls, user_id: str, agent_name: str) -> dict[str, Any] | None:
        """Fetch the explicit unlock grant for a named agent.

        Returns:
            Row with ``unlocked`` or None if no grant exists.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            client = cls.get_client()
            response = (
                client.table("agent_access")
                .select("user_id, agent_name, unlocked")
                .eq("user_id", user_id)
                .eq("agent_name", agent_name)
                .maybe_single()
                .execute()
            )
            if response is None or response.data is None:
                return None
            return cast(dict[str, Any], response.data)
        except Exception as e:
            raise DatabaseError(f"Failed to fetch agent access: {e}") from e

    # ====================
    # Startup memory
    # ====================

    @classmethod
    async def get_memory(cls, user_id: str) -> dict[str, Any] | None:
        """Fetch the user's startup memory row.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            client = cls.get_client()
            response = (
                client.table("startup_memory")
                .select("user_id, idea, stage, industry, problem, solution, updated_at")
                .eq("user_id", user_id)
                .maybe_single()
                .execute()
            )
            if response is None or response.data is None:
                return None
            return cast(dict[str, Any], response.data)
        except Exception as e:
            raise DatabaseError(f"Failed to fetch startup memory: {e}") from e

    @classmethod
    async def upsert_memory(cls, user_id: str, fields: dict[str, str]) -> None:
        """Write changed memory fields, leaving the others untouched.

        Only the given columns (plus ``user_id`` and ``updated_at``) are sent,
        so the upsert never resets fields that were not mentioned.

        Raises:
            DatabaseError: If database operation fails.
        """
        record: dict[str, Any] = {
            **fields,
            "user_id": user_id,
            "updated_at": datetime.now(UTC).isoformat(),
        }
        try:
            client = cls.get_client()
            client.table("startup_memory").upsert(record).execute()
        except Exception as e:
            raise DatabaseError(f"Failed to upsert startup memory: {e}") from e

    # ====================
    # Chat history
    # ====================

    @classmethod
    async def get_recent_history(
        cls, user_id: str, agent_name: str, limit: int = 10
    ) -> list[dict[str, Any]]:
        """Fetch the latest ``limit`` turns for (user, agent), oldest-first.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            client = cls.get_client()
            response = (
                client.table("chat_history")
                .select("user_message, ai_reply, created_at")
                .eq("user_id", user_id)
                .eq("agent_name", agent_name)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
            return _chronological(cast(list[dict[str, Any]], response.data or []))
        except Exception as e:
            raise DatabaseError(f"Failed to fetch chat history: {e}") from e

    @classmethod
    async def get_history(cls, user_id: str, agent_name: str) -> list[dict[str, Any]]:
        """Fetch every turn for (user, agent), oldest-first.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            client = cls.get_client()
            response = (
                client.table("chat_history")
                .select("user_message, ai_reply, created_at")
                .eq("user_id", user_id)
                .eq("agent_name", agent_name)
                .order("created_at")
                .execute()
            )
            return _chronological(cast(list[dict[str, Any]], response.data or []))
        except Exception as e:
            raise DatabaseError(f"Failed to fetch chat history: {e}") from e

    @classmethod
    async def append_history(
        cls, user_id: str, agent_name: str, user_message: str, ai_reply: str
    ) -> None:
        """Append one exchange to ``chat_history``.

        Raises:
            DatabaseError: If database operation fails.
        """
        try:
            client = cls.get_client()
            client.table("chat_history").insert(
                {
                    "user_id": user_id,
                    "agent_name": agent_name,
                    "user_message": user_message,
                    "ai_reply": ai_reply,
                }
            ).execute()
        except Exception as e:
            raise DatabaseError(f"Failed to append chat history: {e}") from e
