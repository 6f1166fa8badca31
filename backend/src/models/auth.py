"""Authentication Pydantic models."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Login or signup by email and password.

    Fields are optional at the schema level; the auth service reports
    missing or malformed values with user-facing messages.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    password: str | None = None
    is_signup: bool = Field(False, alias="isSignup")


class LoginResponse(BaseModel):
    """Authenticated user and the agents they may use."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    email: str
    subscriptions: dict[str, bool] = Field(
        default_factory=dict, description="agent id → true for every active agent"
    )
