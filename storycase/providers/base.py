from __future__ import annotations

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """
    Interface for the text-generation services used to produce test cases.

    Implementations make a single HTTP call with an explicit timeout and
    return the raw model text. Parsing belongs to the caller.
    """

    name: str = "llm"

    @abstractmethod
    async def generate_test_cases(self, prompt: str, **kwargs: object) -> str:
        """Send the prompt and return the raw response text."""
        ...
