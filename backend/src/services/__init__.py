"""Services package."""

from src.services.access_service import AccessDecision, AccessService
from src.services.auth_service import AuthService
from src.services.chat_service import ChatService

__all__ = ["AccessDecision", "AccessService", "AuthService", "ChatService"]
