"""FastAPI dependencies for service construction."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.services.auth_service import AuthService
from src.services.chat_service import ChatService


@lru_cache
def get_chat_service() -> ChatService:
    """Shared ChatService; it holds no per-request state."""
    return ChatService()


@lru_cache
def get_auth_service() -> AuthService:
    """Shared AuthService."""
    return AuthService()


# Type aliases for common dependency patterns
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
