from __future__ import annotations

import logging

from storycase.core.config import get_settings
from storycase.core.errors import ConfigurationError
from storycase.providers.base import LLMProvider

logger = logging.getLogger(__name__)


class GroqProvider(LLMProvider):
    """LLM provider that calls the Groq API (groq SDK)."""

    name = "groq"

    def __init__(self) -> None:
        self._settings = get_settings()
        api_key = self._settings.groq_api_key
        if not api_key:
            raise ConfigurationError(
                "Groq API key is required when using Groq provider. "
                "Set STORYCASE_GROQ_API_KEY in .env."
            )
        from groq import AsyncGroq
        self._client = AsyncGroq(
            api_key=api_key,
            timeout=float(self._settings.groq_timeout_seconds),
            max_retries=0,
        )

    async def generate_test_cases(self, prompt: str, **kwargs: object) -> str:
        model_id = self._settings.groq_model
        logger.info("Groq request: model=%s", model_id)
        response = await self._client.chat.completions.create(
            model=model_id,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.3,
        )
        content = response.choices[0].message.content if response.choices else None
        if content is None:
            return ""
        return content
