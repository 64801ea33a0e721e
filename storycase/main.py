"""
Application factory for the test case generation service.

Run: python -m storycase  (or uvicorn storycase.main:create_app --factory)
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from storycase.api import register_routes
from storycase.api.generate import error_response
from storycase.core.config import get_settings
from storycase.core.logging_config import configure_logging
from storycase.providers import LLMProvider, get_provider
from storycase.services.generation_service import GenerationService

logger = logging.getLogger(__name__)


async def _malformed_request_handler(request: Request, exc: RequestValidationError):
    logger.warning("Malformed request to %s: %s", request.url.path, exc.errors())
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Malformed request body; expected a JSON object with a 'prompt' or 'description' field.",
    )


def create_app(provider: Optional[LLMProvider] = None) -> FastAPI:
    """
    Application factory for the FastAPI app.

    Without an explicit provider the configured one is built here, so a
    missing API key fails at startup rather than on the first request.
    """
    configure_logging()
    settings = get_settings()

    if provider is None:
        provider = get_provider()
    logger.info("Using LLM provider %s", provider.name)

    app = FastAPI(
        title="Storycase",
        description=(
            "Generates structured test cases from user stories with a "
            "generative language model."
        ),
        version="0.1.0",
    )
    app.state.generation_service = GenerationService(provider)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _malformed_request_handler)

    register_routes(app)

    return app
