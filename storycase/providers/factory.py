from __future__ import annotations

from storycase.core.config import get_settings
from storycase.core.errors import ConfigurationError
from storycase.providers.base import LLMProvider

SUPPORTED_PROVIDERS: tuple[str, ...] = ("gemini", "openai", "groq", "ollama")


def get_provider(provider_name: str | None = None) -> LLMProvider:
    """Return the LLM provider for the given name (default from settings)."""
    settings = get_settings()
    name = (provider_name or settings.default_llm_provider).strip().lower()

    # Provider modules import their SDKs; load only the selected one.
    if name == "gemini":
        from storycase.providers.gemini_provider import GeminiProvider
        return GeminiProvider()
    if name == "openai":
        from storycase.providers.openai_provider import OpenAIProvider
        return OpenAIProvider()
    if name == "groq":
        from storycase.providers.groq_provider import GroqProvider
        return GroqProvider()
    if name == "ollama":
        from storycase.providers.ollama_provider import OllamaProvider
        return OllamaProvider()

    raise ConfigurationError(
        f"Unsupported LLM provider: {provider_name or name!r}. "
        f"Use one of: {', '.join(SUPPORTED_PROVIDERS)}."
    )
