"""Models package for the Startup Setu backend."""

from src.models.auth import LoginRequest, LoginResponse
from src.models.chat import (
    MEMORY_FIELDS,
    ChatRequest,
    ChatResponse,
    ChatTurn,
    HistoryEntry,
    HistoryResponse,
    StartupMemory,
)

__all__ = [
    "MEMORY_FIELDS",
    "ChatRequest",
    "ChatResponse",
    "ChatTurn",
    "HistoryEntry",
    "HistoryResponse",
    "LoginRequest",
    "LoginResponse",
    "StartupMemory",
]
