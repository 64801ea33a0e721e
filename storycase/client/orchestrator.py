from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from storycase.client.errors import NetworkError, ValidationError
from storycase.client.feedback import FeedbackSink, LoggingFeedback
from storycase.client.table import TestCaseTable
from storycase.core.config import get_settings
from storycase.schemas.issue import Issue
from storycase.schemas.testcase import TestCase

logger = logging.getLogger(__name__)

EMPTY_STORY_MESSAGE = "Please enter a user story."
EMPTY_ISSUE_MESSAGE = "The selected issue has no description."
LOADING_MESSAGE = "Generating test cases..."


class GenerationOrchestrator:
    """
    Sends free text or an issue description to POST /generate and loads
    the result into the table.

    Free text is checked for emptiness before any request is made. An
    issue's description is sent as-is, even when empty, unless
    ``validate_issue_prompt`` is set; the server then rejects it with 400.
    """

    def __init__(
        self,
        table: TestCaseTable,
        client: httpx.AsyncClient,
        feedback: Optional[FeedbackSink] = None,
        *,
        validate_issue_prompt: Optional[bool] = None,
    ) -> None:
        self._table = table
        self._client = client
        self._feedback = feedback or LoggingFeedback()
        if validate_issue_prompt is None:
            validate_issue_prompt = get_settings().validate_issue_prompt
        self._validate_issue_prompt = validate_issue_prompt

    @classmethod
    def from_settings(
        cls,
        table: TestCaseTable,
        feedback: Optional[FeedbackSink] = None,
    ) -> "GenerationOrchestrator":
        settings = get_settings()
        client = httpx.AsyncClient(
            base_url=settings.generator_base_url,
            timeout=settings.client_timeout_seconds,
        )
        return cls(table, client, feedback)

    @property
    def table(self) -> TestCaseTable:
        return self._table

    async def aclose(self) -> None:
        await self._client.aclose()

    async def generate_from_text(self, user_story: str) -> Optional[List[TestCase]]:
        """Returns the new test cases, or None when nothing was loaded."""
        try:
            text = _require_text(user_story, EMPTY_STORY_MESSAGE)
        except ValidationError as exc:
            self._feedback.show_inline_error(str(exc))
            return None
        return await self._run({"description": text})

    async def generate_from_issue(self, issue: Issue) -> Optional[List[TestCase]]:
        description = issue.description or ""
        if self._validate_issue_prompt:
            try:
                _require_text(description, EMPTY_ISSUE_MESSAGE)
            except ValidationError as exc:
                self._feedback.show_inline_error(str(exc))
                return None
        logger.info("Generating test cases for issue %s", issue.key)
        payload = {
            "prompt": description,
            "issue_key": issue.key,
            "summary": issue.summary or "",
            "issue_type": issue.issue_type or "",
            "status": issue.status or "",
        }
        return await self._run(payload)

    @asynccontextmanager
    async def _loading(self) -> AsyncIterator[None]:
        self._feedback.show_loading(LOADING_MESSAGE)
        try:
            yield
        finally:
            self._feedback.hide_loading()

    async def _run(self, payload: Dict[str, Any]) -> Optional[List[TestCase]]:
        try:
            async with self._loading():
                cases = await self._post_generate(payload)
        except NetworkError as exc:
            logger.error("Test case generation failed: %s", exc)
            self._feedback.show_error(str(exc))
            return None

        self._table.replace(cases)
        self._feedback.update_count(self._table.count)
        self._feedback.show_success(f"Generated {len(cases)} test case(s).")
        return cases

    async def _post_generate(self, payload: Dict[str, Any]) -> List[TestCase]:
        try:
            response = await self._client.post(
                "/generate",
                json=payload,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise NetworkError(f"Failed to generate test cases: {exc}") from exc

        if response.is_error:
            raise NetworkError(_error_message(response))

        try:
            body = response.json()
            return [TestCase.model_validate(item) for item in body["testCases"]]
        except (ValueError, KeyError, TypeError) as exc:
            raise NetworkError(
                f"Unexpected response from the generation service: {exc}"
            ) from exc


def _require_text(value: Optional[str], message: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(message)
    return text


def _error_message(response: httpx.Response) -> str:
    fallback = f"Failed to generate test cases (HTTP {response.status_code})"
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback
