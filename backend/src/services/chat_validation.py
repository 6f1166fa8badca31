"""Validation of inbound chat payloads."""

from typing import Any

_REQUIRED_TEXT_FIELDS = ("user_id", "session_id", "message")


def _is_text(value: Any) -> bool:
    # Whitespace-only values count as missing
    return isinstance(value, str) and bool(value.strip())


def validate_chat_request(payload: Any) -> list[str]:
    """Check a chat payload for required fields and types.

    Violations accumulate so every problem can be reported at once.

    Args:
        payload: Parsed JSON request body.

    Returns:
        Human-readable error strings; empty when the payload is valid.
    """
    if not isinstance(payload, dict):
        return ["Missing request body"]

    errors = [
        f"{field} is required" for field in _REQUIRED_TEXT_FIELDS if not _is_text(payload.get(field))
    ]

    preferred_agent = payload.get("preferred_agent")
    if preferred_agent is not None and not isinstance(preferred_agent, str):
        errors.append("preferred_agent must be a string")

    return errors
