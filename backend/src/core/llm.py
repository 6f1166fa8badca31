"""LLM client module for chat completions.

Routes requests through LiteLLM to Groq's OpenAI-compatible API. The client
takes a ready-made message list and returns the generated text.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import litellm
from litellm import acompletion

from src.core.config import settings
from src.core.exceptions import CompletionError

litellm.set_verbose = False  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def _extract_text(response: Any) -> str:
    """Pull the first choice's message content; anything non-text becomes ""."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


class LLMClient:
    """Async client for hosted chat completions."""

    def __init__(
        self,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        """Initialize LLM client.

        Args:
            model: LiteLLM model string (defaults to ``groq/<GROQ_MODEL>``).
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.
        """
        self._api_key = settings.GROQ_API_KEY.get_secret_value()
        self._api_base = settings.GROQ_API_BASE
        self._model = model or settings.completion_model
        self._temperature = (
            settings.COMPLETION_TEMPERATURE if temperature is None else temperature
        )
        self._max_tokens = max_tokens or settings.COMPLETION_MAX_TOKENS

    async def generate(self, messages: list[dict[str, str]]) -> str:
        """Generate a reply for an ordered message list.

        Args:
            messages: ``{"role", "content"}`` dicts; system message first.

        Returns:
            The assistant's text, or "" when the response carries none.

        Raises:
            CompletionError: On non-success responses or connection failures.
        """
        start = time.perf_counter()
        try:
            response = await acompletion(
                model=self._model,
                messages=messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                api_key=self._api_key,
                api_base=self._api_base,
            )
        except Exception as e:
            status = getattr(e, "status_code", None)
            message = getattr(e, "message", None) or str(e)
            logger.error(
                "Completion API error: status=%s message=%s",
                status,
                message,
                extra={"model": self._model},
            )
            raise CompletionError(
                f"Completion API error: {status} {message}", upstream_status=status
            ) from e

        elapsed_ms = (time.perf_counter() - start) * 1000
        text = _extract_text(response)
        logger.info(
            "Completion generated",
            extra={
                "model": self._model,
                "message_count": len(messages),
                "reply_chars": len(text),
                "duration_ms": round(elapsed_ms, 1),
            },
        )
        return text
