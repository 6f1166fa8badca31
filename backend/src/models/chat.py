"""Chat Pydantic models.

This module contains the request/response shapes of the chat endpoints and
the records the chat orchestrator reads from the database.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

MEMORY_FIELDS: tuple[str, ...] = ("idea", "stage", "industry", "problem", "solution")


class ChatRequest(BaseModel):
    """Inbound chat turn, constructed after the payload passed validation."""

    user_id: str = Field(..., min_length=1, description="Opaque user identifier")
    session_id: str = Field(..., min_length=1, description="Client session identifier")
    message: str = Field(..., min_length=1, description="User's message")
    preferred_agent: str | None = Field(
        None, description="Agent slug or display name (defaults to the free agent)"
    )


class ChatResponse(BaseModel):
    """Outcome of a chat turn."""

    reply: str
    agent: str
    upgrade_required: bool = False


class StartupMemory(BaseModel):
    """Per-user startup profile injected into every prompt."""

    user_id: str | None = None
    idea: str | None = None
    stage: str | None = None
    industry: str | None = None
    problem: str | None = None
    solution: str | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any] | None) -> "StartupMemory":
        """Build from a ``startup_memory`` row, tolerating a missing row."""
        if not row:
            return cls()
        return cls.model_validate(row)

    def value_of(self, field: str) -> str:
        """Stored value of a memory field, with absent treated as empty."""
        return getattr(self, field) or ""

    def filled_fields(self) -> dict[str, str]:
        """Non-empty memory fields, in display order."""
        return {field: self.value_of(field) for field in MEMORY_FIELDS if self.value_of(field)}


class ChatTurn(BaseModel):
    """One stored exchange from ``chat_history``."""

    user_message: str = ""
    ai_reply: str = ""
    created_at: str | None = None

    @field_validator("user_message", "ai_reply", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class HistoryEntry(BaseModel):
    """A single exchange in the chat-history response.

    ``user_message``/``ai_reply`` mirror ``message``/``reply`` for older clients.
    """

    message: str
    reply: str
    timestamp: str | None = None
    user_message: str
    ai_reply: str

    @classmethod
    def from_turn(cls, turn: ChatTurn) -> "HistoryEntry":
        return cls(
            message=turn.user_message,
            reply=turn.ai_reply,
            timestamp=turn.created_at,
            user_message=turn.user_message,
            ai_reply=turn.ai_reply,
        )


class HistoryResponse(BaseModel):
    """Response for the chat-history endpoint, oldest exchange first."""

    history: list[HistoryEntry] = Field(default_factory=list)
