"""Chat turn orchestration.

A turn runs: validate -> authorize -> build context -> generate -> persist
-> extract-and-update memory. Validation failures abort before any external
call; a locked agent ends the turn with an upgrade notice. Reads of memory and
history degrade to empty on failure, a completion failure fails the turn, and
the history/memory writes are best-effort background writes.
"""

import logging
from typing import Any

from src.agents.registry import AgentProfile, resolve_agent
from src.core.config import settings
from src.core.exceptions import DatabaseError, ValidationError
from src.core.llm import LLMClient
from src.core.persona import build_system_prompt
from src.core.write_policy import dispatch_write
from src.db.supabase import SupabaseClient
from src.models.chat import (
    ChatRequest,
    ChatResponse,
    ChatTurn,
    HistoryEntry,
    HistoryResponse,
    StartupMemory,
)
from src.services.access_service import AccessService
from src.services.chat_validation import validate_chat_request
from src.services.memory_extractor import changed_memory_fields, extract_memory_from_text

logger = logging.getLogger(__name__)


def build_messages(
    system_prompt: str, history: list[ChatTurn], message: str
) -> list[dict[str, str]]:
    """Assemble the completion message list.

    One system message, then each prior turn as a user/assistant pair,
    then the new user message.
    """
    messages = [{"role": "system", "content": system_prompt}]
    for turn in history:
        messages.append({"role": "user", "content": turn.user_message})
        messages.append({"role": "assistant", "content": turn.ai_reply})
    messages.append({"role": "user", "content": message})
    return messages


class ChatService:
    """Runs chat turns against the database and the completion API."""

    def __init__(
        self,
        llm_client: LLMClient | None = None,
        access_service: AccessService | None = None,
        history_limit: int | None = None,
    ) -> None:
        self._llm = llm_client or LLMClient()
        self._access = access_service or AccessService()
        self._history_limit = (
            settings.CHAT_HISTORY_CONTEXT_LIMIT if history_limit is None else history_limit
        )

    async def process_turn(self, payload: Any) -> ChatResponse:
        """Handle one inbound chat turn.

        Args:
            payload: Raw request body.

        Returns:
            The reply, the agent that answered, and whether an upgrade is required.

        Raises:
            ValidationError: If the payload is missing required fields.
            CompletionError: If the completion API fails.
        """
        errors = validate_chat_request(payload)
        if errors:
            raise ValidationError.from_errors(errors)
        request = ChatRequest.model_validate(payload)
        user_id = request.user_id

        agent = resolve_agent(request.preferred_agent)
        decision = await self._access.check_access(user_id, agent)
        if not decision.granted:
            return ChatResponse(
                reply=decision.upgrade_message,
                agent=agent.id,
                upgrade_required=True,
            )

        memory = await self._load_memory(user_id)
        history = await self._load_recent_history(user_id, agent)

        system_prompt = build_system_prompt(agent, memory, history)
        messages = build_messages(system_prompt, history, request.message)
        reply = await self._llm.generate(messages)
        if not isinstance(reply, str):
            reply = ""

        logger.info(
            "Chat turn answered",
            extra={
                "user_id": user_id,
                "session_id": request.session_id,
                "agent": agent.id,
                "history_turns": len(history),
            },
        )

        await dispatch_write(
            "append_history",
            lambda: SupabaseClient.append_history(user_id, agent.id, request.message, reply),
            user_id=user_id,
        )

        updates = changed_memory_fields(memory, extract_memory_from_text(request.message))
        if updates:
            logger.info(
                "Updating startup memory",
                extra={"user_id": user_id, "fields": sorted(updates)},
            )
            await dispatch_write(
                "upsert_memory",
                lambda: SupabaseClient.upsert_memory(user_id, updates),
                user_id=user_id,
            )

        return ChatResponse(reply=reply, agent=agent.id, upgrade_required=False)

    async def get_history(self, user_id: str, agent_id: str) -> HistoryResponse:
        """Full chat history for (user, agent), oldest first.

        ``agent_id`` may be a slug or a display name; rows are stored by slug.

        Raises:
            ValidationError: If either identifier is missing.
            DatabaseError: If the history cannot be read.
        """
        if not user_id or not agent_id or not agent_id.strip():
            raise ValidationError("user_id and agent_id required")
        agent = resolve_agent(agent_id)
        rows = await SupabaseClient.get_history(user_id, agent.id)
        return HistoryResponse(
            history=[HistoryEntry.from_turn(ChatTurn.model_validate(row)) for row in rows]
        )

    async def _load_memory(self, user_id: str) -> StartupMemory:
        try:
            row = await SupabaseClient.get_memory(user_id)
        except DatabaseError:
            logger.warning(
                "Startup memory unavailable; continuing without it",
                exc_info=True,
                extra={"user_id": user_id},
            )
            return StartupMemory()
        return StartupMemory.from_row(row)

    async def _load_recent_history(self, user_id: str, agent: AgentProfile) -> list[ChatTurn]:
        try:
            rows = await SupabaseClient.get_recent_history(
                user_id, agent.id, limit=self._history_limit
            )
        except DatabaseError:
            logger.warning(
                "Chat history unavailable; continuing without it",
                exc_info=True,
                extra={"user_id": user_id, "agent": agent.id},
            )
            return []
        return [ChatTurn.model_validate(row) for row in rows]
