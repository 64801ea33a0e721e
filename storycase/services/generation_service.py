from __future__ import annotations

import logging
from typing import List

from storycase.core.errors import GenerationError
from storycase.providers.base import LLMProvider
from storycase.schemas.testcase import TestCase
from storycase.services.normalizer import parse_test_cases
from storycase.utils.prompt_builder import build_testcase_prompt


logger = logging.getLogger(__name__)


class GenerationService:
    """
    Prompt -> model -> normalized test cases.

    Holds no per-request state, so one instance serves concurrent requests.
    A failed call is terminal: there is no retry.
    """

    def __init__(self, provider: LLMProvider) -> None:
        self._provider = provider

    @property
    def provider(self) -> LLMProvider:
        return self._provider

    async def generate(self, user_story: str) -> List[TestCase]:
        prompt = build_testcase_prompt(user_story)
        logger.info(
            "Test case generation requested",
            extra={"provider": self._provider.name, "story_chars": len(user_story)},
        )
        raw_output = await self._call_provider(prompt)
        cases = parse_test_cases(raw_output)
        logger.info("Normalized %d test case(s)", len(cases))
        return cases

    async def _call_provider(self, prompt: str) -> str:
        try:
            return await self._provider.generate_test_cases(prompt)
        except Exception as exc:
            logger.exception("Provider %s failed", self._provider.name)
            raise GenerationError(
                f"Failed to generate test cases with {self._provider.name}: {exc}"
            ) from exc
