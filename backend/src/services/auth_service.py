"""Email/password login and signup.

Users are provisioned on signup with a bcrypt password hash. Every successful
login re-grants the free agent, then reports which agents the user may use.
"""

import logging
import re
import uuid
from typing import Any

import bcrypt

from src.agents.registry import DEFAULT_AGENT_ID
from src.core.config import settings
from src.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    ValidationError,
)
from src.core.write_policy import dispatch_write
from src.db.supabase import SupabaseClient
from src.models.auth import LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against a bcrypt hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS),
    ).decode("utf-8")


def build_subscriptions_map(rows: list[dict[str, Any]] | None) -> dict[str, bool]:
    """Map agent id → True for the free agent and every active subscription.

    Inactive rows and agents without a row are left out, never set to False.
    """
    subscriptions: dict[str, bool] = {DEFAULT_AGENT_ID.value: True}
    for row in rows or []:
        agent_id = row.get("agent_id")
        if agent_id and row.get("is_active") is True:
            subscriptions[agent_id] = True
    return subscriptions


class AuthService:
    """Login/signup against the ``users`` and ``subscriptions`` tables."""

    def _validate(self, request: LoginRequest) -> tuple[str, str]:
        email = request.email or ""
        if not _EMAIL_RE.match(email):
            raise ValidationError("Valid email address required")
        password = request.password or ""
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
            )
        return email, password

    async def login(self, request: LoginRequest) -> LoginResponse:
        """Log a user in, or sign them up when ``is_signup`` is set.

        Args:
            request: Email, password and signup flag.

        Returns:
            The user's id, email and active agents.

        Raises:
            ValidationError: Malformed email or short password.
            AuthenticationError: Unknown email or wrong password on login.
            ConflictError: Signup with an email that is already registered.
            DatabaseError: User lookup or creation failed.
        """
        email, password = self._validate(request)

        existing = await SupabaseClient.get_user_by_email(email)

        if existing is not None:
            if request.is_signup:
                raise ConflictError(
                    "Email already registered. Please login instead.", resource="user"
                )
            if not verify_password(password, existing.get("password_hash")):
                raise AuthenticationError("Invalid email or password")
            user_id = str(existing["id"])
            logger.info("User logged in", extra={"user_id": user_id})
        else:
            if not request.is_signup:
                raise AuthenticationError("Invalid email or password")
            user_id = str(uuid.uuid4())
            password_hash = get_password_hash(password)
            await dispatch_write(
                "create_user",
                lambda: SupabaseClient.create_user(user_id, email, password_hash),
                user_id=user_id,
            )
            logger.info("User signed up", extra={"user_id": user_id})

        # Self-healing: the free agent is re-granted on every login
        await dispatch_write(
            "upsert_free_subscription",
            lambda: SupabaseClient.upsert_free_subscription(user_id, DEFAULT_AGENT_ID.value),
            user_id=user_id,
        )

        rows: list[dict[str, Any]] = []
        try:
            rows = await SupabaseClient.list_subscriptions(user_id)
        except DatabaseError:
            logger.warning(
                "Subscription fetch failed; returning free agent only",
                exc_info=True,
                extra={"user_id": user_id},
            )

        subscriptions = build_subscriptions_map(rows)
        logger.info(
            "Resolved subscriptions",
            extra={"user_id": user_id, "agents": sorted(subscriptions)},
        )
        return LoginResponse(user_id=user_id, email=email, subscriptions=subscriptions)
