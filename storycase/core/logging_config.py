import logging
import sys
from typing import Optional

from storycase.core.config import get_settings


_configured = False

# HTTP and SDK loggers that repeat every request/response at INFO.
_QUIET_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "httpx",
    "httpcore",
    "google_genai",
    "openai",
    "groq",
)


def configure_logging(level_override: Optional[str] = None) -> None:
    """
    Configure logging for the generation service and the client.

    Idempotent. ``debug`` in settings forces DEBUG unless a level is
    passed explicitly.
    """
    global _configured

    if _configured:
        return

    settings = get_settings()
    if level_override:
        log_level = level_override.upper()
    elif settings.debug:
        log_level = "DEBUG"
    else:
        log_level = settings.log_level.upper()

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
    _configured = True
