"""Tests for system prompt assembly."""

from src.agents.registry import AGENTS, DEFAULT_AGENT, AgentId, resolve_agent
from src.core.persona import (
    RECENT_CONTEXT_PREFIX_CHARS,
    build_system_prompt,
    format_memory,
    format_recent_context,
)
from src.models.chat import ChatTurn, StartupMemory


def _turn(message: str, reply: str = "ok") -> ChatTurn:
    return ChatTurn(user_message=message, ai_reply=reply)


# ---------------------------------------------------------------------------
# Memory summary
# ---------------------------------------------------------------------------


def test_format_memory_labels_filled_fields_in_order() -> None:
    memory = StartupMemory(industry="fintech", idea="UPI for kiranas", stage="")

    assert format_memory(memory) == (
        "Current startup profile:\n- Idea: UPI for kiranas\n- Industry: fintech"
    )


def test_format_memory_empty_or_missing() -> None:
    assert format_memory(None) == ""
    assert format_memory(StartupMemory()) == ""


# ---------------------------------------------------------------------------
# Recent context
# ---------------------------------------------------------------------------


def test_recent_context_uses_last_three_user_messages() -> None:
    history = [_turn(f"message {i}") for i in range(5)]

    text = format_recent_context(history)

    assert text == (
        "Recent conversation context: User has discussed - "
        "message 2 | message 3 | message 4..."
    )
    assert "message 1" not in text


def test_recent_context_truncates_each_message() -> None:
    long_message = "x" * 250

    text = format_recent_context([_turn(long_message)])

    assert "x" * RECENT_CONTEXT_PREFIX_CHARS in text
    assert "x" * (RECENT_CONTEXT_PREFIX_CHARS + 1) not in text


def test_recent_context_empty_history() -> None:
    assert format_recent_context([]) == ""


# ---------------------------------------------------------------------------
# Full prompt
# ---------------------------------------------------------------------------


def test_prompt_starts_with_agent_persona() -> None:
    profile = AGENTS[AgentId.HR_SOLUTIONS]

    prompt = build_system_prompt(profile)

    assert prompt.startswith("You are the HR Solutions Agent.")


def test_unknown_agent_falls_back_to_default_persona() -> None:
    profile = resolve_agent("Astrology Agent")

    prompt = build_system_prompt(profile)

    assert prompt.startswith(DEFAULT_AGENT.persona)


def test_prompt_includes_memory_and_context() -> None:
    memory = StartupMemory(problem="late payments")
    history = [_turn("How do I price my SaaS?")]

    prompt = build_system_prompt(DEFAULT_AGENT, memory, history)

    assert "- Problem: late payments" in prompt
    assert "User has discussed - How do I price my SaaS?..." in prompt


def test_prompt_is_pure() -> None:
    memory = StartupMemory(idea="x")
    history = [_turn("a")]

    assert build_system_prompt(DEFAULT_AGENT, memory, history) == build_system_prompt(
        DEFAULT_AGENT, memory, history
    )
