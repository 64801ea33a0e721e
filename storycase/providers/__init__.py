"""
LLM provider abstraction layer.

All provider-specific logic lives in provider implementations.
The generation pipeline depends only on the LLMProvider interface.
"""

from storycase.providers.base import LLMProvider
from storycase.providers.factory import get_provider

__all__ = ["LLMProvider", "get_provider"]
