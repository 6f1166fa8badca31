"""System prompt assembly for chat agents.

The system prompt for a turn has three parts:
  1. Persona - fixed text for the agent (default persona for unknown agents)
  2. Startup profile - labelled, non-empty memory fields
  3. Recent context - short prefixes of the last few user messages

Usage:
    prompt = build_system_prompt(profile, memory, history)
"""

import logging
from collections.abc import Sequence

from src.agents.registry import AgentProfile
from src.models.chat import ChatTurn, StartupMemory

logger = logging.getLogger(__name__)

RECENT_CONTEXT_TURNS = 3
RECENT_CONTEXT_PREFIX_CHARS = 100
RECENT_CONTEXT_SEPARATOR = " | "

_MEMORY_LABELS: dict[str, str] = {
    "idea": "Idea",
    "stage": "Stage",
    "industry": "Industry",
    "problem": "Problem",
    "solution": "Solution",
}


def format_memory(memory: StartupMemory | None) -> str:
    """Render the non-empty memory fields as a labelled list."""
    if memory is None:
        return ""
    parts = [f"{_MEMORY_LABELS[field]}: {value}" for field, value in memory.filled_fields().items()]
    if not parts:
        return ""
    return "Current startup profile:\n- " + "\n- ".join(parts)


def format_recent_context(history: Sequence[ChatTurn]) -> str:
    """Summarize the latest user messages for lightweight continuity.

    Args:
        history: Prior turns, oldest first.
    """
    if not history:
        return ""
    recent = history[-RECENT_CONTEXT_TURNS:]
    summary = RECENT_CONTEXT_SEPARATOR.join(
        turn.user_message[:RECENT_CONTEXT_PREFIX_CHARS] for turn in recent
    )
    return f"Recent conversation context: User has discussed - {summary}..."


def build_system_prompt(
    profile: AgentProfile,
    memory: StartupMemory | None = None,
    history: Sequence[ChatTurn] = (),
) -> str:
    """Build the system instruction text for one chat turn.

    Pure function of its inputs.

    Args:
        profile: Agent answering the turn.
        memory: The user's startup memory, if any.
        history: Prior turns for (user, agent), oldest first.

    Returns:
        Persona, memory summary and recent context separated by blank lines.
    """
    return f"{profile.persona}\n\n{format_memory(memory)}\n\n{format_recent_context(history)}"
