from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (parent of storycase/) for .env loading
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.
    """

    # Core app settings
    app_name: str = Field(default="storycase")
    environment: str = Field(default="development")  # development | staging | production
    debug: bool = Field(default=False)

    # HTTP server
    api_prefix: str = Field(default="")
    host: str = Field(default="0.0.0.0")
    port: int = Field(
        default=5000,
        validation_alias=AliasChoices("STORYCASE_PORT", "PORT"),
    )
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Observability
    log_level: str = Field(default="INFO")

    # LLM provider selection ("gemini" | "openai" | "groq" | "ollama")
    default_llm_provider: str = Field(
        default="gemini",
        description="LLM provider used for test case generation.",
    )

    # Gemini
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("STORYCASE_GEMINI_API_KEY", "GEMINI_API_KEY"),
        description="Gemini API key. Required when using the Gemini provider.",
    )
    gemini_model: str = Field(default="gemini-2.0-flash")
    gemini_timeout_seconds: int = Field(default=120)

    # OpenAI (when provider is openai)
    openai_api_key: Optional[str] = Field(default=None)
    openai_model: str = Field(default="gpt-4o-mini")
    openai_timeout_seconds: int = Field(default=120)

    # Groq (when provider is groq)
    groq_api_key: Optional[str] = Field(default=None)
    groq_model: str = Field(default="llama-3.3-70b-versatile")
    groq_timeout_seconds: int = Field(default=120)

    # Ollama (when provider is ollama)
    ollama_base_url: str = Field(default="http://localhost:11434")
    ollama_model: str = Field(default="llama3.2:3b")
    ollama_timeout_seconds: int = Field(default=600)

    # Prompt
    navigation_url: str = Field(
        default="https://a-qa-my.siliconexpert.com/",
        description="Every generated step list starts by navigating here.",
    )

    # Client side: generation service and issue tracker
    generator_base_url: str = Field(default="http://localhost:5000")
    tracker_base_url: str = Field(default="http://localhost:8000/api/jira")
    tracker_project_key: str = Field(default="SE2")
    tracker_board_id: int = Field(default=942)
    issue_page_size: int = Field(default=5, ge=1)
    client_timeout_seconds: float = Field(default=180.0)
    validate_issue_prompt: bool = Field(
        default=False,
        description="Reject empty issue descriptions before calling /generate.",
    )

    model_config = SettingsConfigDict(
        env_prefix="STORYCASE_",
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return a cached settings instance for use as a dependency.
    """
    return Settings()
