from __future__ import annotations

import logging

from storycase.core.config import get_settings
from storycase.core.errors import ConfigurationError
from storycase.providers.base import LLMProvider

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    name = "gemini"

    def __init__(self) -> None:
        self._settings = get_settings()
        api_key = self._settings.gemini_api_key
        if not api_key:
            raise ConfigurationError(
                "Gemini API key is required. Set GEMINI_API_KEY or "
                "STORYCASE_GEMINI_API_KEY in the environment or .env."
            )
        from google import genai
        from google.genai import types

        self._client = genai.Client(
            api_key=api_key,
            # HttpOptions.timeout is in milliseconds
            http_options=types.HttpOptions(
                timeout=self._settings.gemini_timeout_seconds * 1000,
            ),
        )

    async def generate_test_cases(self, prompt: str, **kwargs: object) -> str:
        model_id = self._settings.gemini_model
        logger.info("Gemini request: model=%s", model_id)
        response = await self._client.aio.models.generate_content(
            model=model_id,
            contents=prompt,
            config={"temperature": 0.3},
        )
        if not response or not response.text:
            return ""
        return response.text
