from __future__ import annotations

import logging
from typing import Optional

from openai import AsyncOpenAI

from storycase.core.config import get_settings
from storycase.core.errors import ConfigurationError
from storycase.providers.base import LLMProvider


logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """LLM provider that calls the OpenAI Chat Completions API."""

    name = "openai"

    def __init__(self, client: Optional[AsyncOpenAI] = None) -> None:
        self._settings = get_settings()
        if client is not None:
            self._client = client
        else:
            api_key = self._settings.openai_api_key
            if not api_key:
                raise ConfigurationError(
                    "OpenAI API key is required when using OpenAI provider. "
                    "Set STORYCASE_OPENAI_API_KEY in environment or .env."
                )
            self._client = AsyncOpenAI(
                api_key=api_key,
                timeout=float(self._settings.openai_timeout_seconds),
                max_retries=0,
            )

    async def generate_test_cases(self, prompt: str, **kwargs: object) -> str:
        model_name = self._settings.openai_model
        logger.info("OpenAI request: model=%s", model_name)

        response = await self._client.chat.completions.create(
            model=model_name,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.3,
        )

        content = response.choices[0].message.content if response.choices else None
        if content is None:
            return ""
        return content
