"""Extract startup-memory updates from labelled lines in a user's message.

Only explicit statements such as ``industry: fintech`` are recognized; the
extractor never guesses, so an unlabelled field yields no entry and the
stored value is preserved.
"""

import logging
import re

from src.models.chat import MEMORY_FIELDS, StartupMemory

logger = logging.getLogger(__name__)

# "<field>: <value>" on a single line, field name case-insensitive
_FIELD_PATTERNS: dict[str, re.Pattern[str]] = {
    field: re.compile(rf"\b{field}[ \t]*:[ \t]*(.+)", re.IGNORECASE) for field in MEMORY_FIELDS
}


def extract_memory_from_text(text: object) -> dict[str, str] | None:
    """Scan free text for labelled memory fields.

    Args:
        text: The user's message.

    Returns:
        Mapping of the fields that matched to their trimmed values, or None
        when nothing matched.
    """
    if not text or not isinstance(text, str):
        return None

    result: dict[str, str] = {}
    for field, pattern in _FIELD_PATTERNS.items():
        for match in pattern.finditer(text):
            value = match.group(1).strip()
            if value:
                result[field] = value
                break

    return result or None


def changed_memory_fields(
    memory: StartupMemory, extracted: dict[str, str] | None
) -> dict[str, str]:
    """Keep only extracted values that differ from what is stored.

    An absent stored value compares as the empty string.
    """
    if not extracted:
        return {}
    return {
        field: value
        for field, value in extracted.items()
        if field in MEMORY_FIELDS and value != memory.value_of(field)
    }
