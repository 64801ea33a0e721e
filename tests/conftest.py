import json
from typing import List, Optional

import pytest

from storycase.client.feedback import FeedbackSink
from storycase.core.config import get_settings
from storycase.providers.base import LLMProvider

LOGIN_CASES = [
    {
        "id": 1,
        "title": "Login with valid credentials",
        "steps": "1. Navigate to https://a-qa-my.siliconexpert.com/\n2. Enter valid credentials\n3. Click login",
        "expectedResult": "User lands on the dashboard",
        "priority": "High",
    },
    {
        "id": 2,
        "Title": "Login with wrong password",
        "Steps": "1. Navigate to https://a-qa-my.siliconexpert.com/\n2. Enter a wrong password",
        "ExpectedResult": "An error message is shown",
        "Priority": "medium",
    },
]


class FakeProvider(LLMProvider):
    name = "fake"

    def __init__(self, output: str = "", error: Optional[Exception] = None) -> None:
        self.output = output
        self.error = error
        self.prompts: List[str] = []

    async def generate_test_cases(self, prompt: str, **kwargs: object) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.output


class RecordingFeedback(FeedbackSink):
    def __init__(self) -> None:
        self.events: List[tuple] = []

    def show_loading(self, message: str) -> None:
        self.events.append(("loading", message))

    def hide_loading(self) -> None:
        self.events.append(("hide_loading",))

    def show_success(self, message: str) -> None:
        self.events.append(("success", message))

    def show_error(self, message: str) -> None:
        self.events.append(("error", message))

    def show_inline_error(self, message: str) -> None:
        self.events.append(("inline_error", message))

    def update_count(self, count: int) -> None:
        self.events.append(("count", count))

    def kinds(self) -> List[str]:
        return [event[0] for event in self.events]


def fenced(cases) -> str:
    return "```json\n" + json.dumps(cases, indent=2) + "\n```"


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
