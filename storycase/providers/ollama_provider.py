from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from storycase.core.config import get_settings
from storycase.providers.base import LLMProvider

logger = logging.getLogger(__name__)


class OllamaProvider(LLMProvider):
    """LLM provider that calls a local Ollama HTTP API."""

    name = "ollama"

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._settings = get_settings()
        self._client = client or httpx.AsyncClient(
            base_url=self._settings.ollama_base_url,
            timeout=httpx.Timeout(
                connect=10.0,
                read=float(self._settings.ollama_timeout_seconds),
                write=10.0,
                pool=10.0,
            ),
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def generate_test_cases(self, prompt: str, **kwargs: object) -> str:
        model_name = self._settings.ollama_model
        payload: Dict[str, Any] = {
            "model": model_name,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": 0.1, "top_p": 0.9},
        }
        logger.info("Requesting test case generation from Ollama: model=%s", model_name)
        response = await self._client.post("/api/generate", json=payload)
        response.raise_for_status()
        data: Dict[str, Any] = response.json()
        raw_output = data.get("response")
        if isinstance(raw_output, str):
            return raw_output
        return response.text
