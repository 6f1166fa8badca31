"""Chat API routes."""

import logging
from typing import Any

from fastapi import APIRouter, Body

from src.api.deps import ChatServiceDep
from src.models.chat import ChatResponse, HistoryResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    service: ChatServiceDep,
    payload: Any = Body(None),
) -> ChatResponse:
    """Send a message to an agent and receive its reply.

    The raw body is validated by the chat service so that every missing
    field is reported in a single 400 response.
    """
    return await service.process_turn(payload)


@router.get("/chat-history", response_model=HistoryResponse)
async def chat_history(
    service: ChatServiceDep,
    user_id: str | None = None,
    agent_id: str | None = None,
) -> HistoryResponse:
    """Return the full history for a user and agent, oldest first."""
    return await service.get_history(user_id or "", agent_id or "")
