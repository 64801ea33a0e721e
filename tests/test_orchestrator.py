import asyncio
import json

import httpx
from httpx import ASGITransport

from storycase.client.orchestrator import EMPTY_STORY_MESSAGE, GenerationOrchestrator
from storycase.client.table import TestCaseTable
from storycase.main import create_app
from storycase.schemas.issue import Issue

from .conftest import LOGIN_CASES, FakeProvider, RecordingFeedback, fenced


def _orchestrator(provider, table=None, **kwargs):
    app = create_app(provider=provider)
    client = httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    feedback = RecordingFeedback()
    return GenerationOrchestrator(table or TestCaseTable(), client, feedback, **kwargs), feedback


def _run(orchestrator, coro):
    async def go():
        try:
            return await coro
        finally:
            await orchestrator.aclose()

    return asyncio.run(go())


def test_free_text_generation_replaces_table():
    provider = FakeProvider(output=fenced(LOGIN_CASES))
    table = TestCaseTable()
    table.add("stale", "s", "e")
    orchestrator, feedback = _orchestrator(provider, table)

    cases = _run(orchestrator, orchestrator.generate_from_text("As a user I want to log in"))

    assert len(cases) == 2
    assert [row.title for row in table.rows] == [
        "Login with valid credentials",
        "Login with wrong password",
    ]
    assert all(row.priority in {"Low", "Medium", "High"} for row in table.rows)
    assert feedback.kinds() == ["loading", "hide_loading", "count", "success"]
    assert ("count", 2) in feedback.events


def test_superscript_model_id_loads_and_leaves_counter_alone():
    case = dict(LOGIN_CASES[0], id="\u00b2")
    orchestrator, feedback = _orchestrator(FakeProvider(output=json.dumps([case])))

    cases = _run(orchestrator, orchestrator.generate_from_text("As a user I want to log in"))

    assert [c.id for c in cases] == ["\u00b2"]
    assert feedback.kinds() == ["loading", "hide_loading", "count", "success"]
    assert orchestrator.table.add("manual", "s", "e").id == 1


def test_empty_free_text_makes_no_call():
    provider = FakeProvider(output="[]")
    orchestrator, feedback = _orchestrator(provider)

    assert _run(orchestrator, orchestrator.generate_from_text("   ")) is None

    assert provider.prompts == []
    assert feedback.events == [("inline_error", EMPTY_STORY_MESSAGE)]


def test_failure_keeps_previous_rows_and_hides_loading():
    provider = FakeProvider(output="not json")
    table = TestCaseTable()
    table.add("kept", "s", "e")
    orchestrator, feedback = _orchestrator(provider, table)

    assert _run(orchestrator, orchestrator.generate_from_text("story")) is None

    assert [row.title for row in table.rows] == ["kept"]
    assert feedback.kinds() == ["loading", "hide_loading", "error"]
    assert feedback.events[-1] == ("error", "Model did not return valid JSON")


def test_transport_error_is_reported():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
    feedback = RecordingFeedback()
    orchestrator = GenerationOrchestrator(TestCaseTable(), client, feedback)

    assert _run(orchestrator, orchestrator.generate_from_text("story")) is None
    assert feedback.kinds() == ["loading", "hide_loading", "error"]
    assert "connection refused" in feedback.events[-1][1]


def test_issue_generation_sends_description_and_metadata():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"testCases": LOGIN_CASES[:1]})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
    orchestrator = GenerationOrchestrator(TestCaseTable(), client, RecordingFeedback())
    issue = Issue(key="SE2-7", summary="Login", description="Users log in", issue_type="Story", status="Open")

    cases = _run(orchestrator, orchestrator.generate_from_issue(issue))

    assert len(cases) == 1
    assert seen == [
        {
            "prompt": "Users log in",
            "issue_key": "SE2-7",
            "summary": "Login",
            "issue_type": "Story",
            "status": "Open",
        }
    ]


def test_issue_without_description_is_sent_by_default():
    provider = FakeProvider(output="[]")
    orchestrator, feedback = _orchestrator(provider, validate_issue_prompt=False)

    result = _run(orchestrator, orchestrator.generate_from_issue(Issue(key="SE2-1")))

    assert result is None
    # the server rejects the empty prompt; the client shows it as a failure
    assert feedback.kinds() == ["loading", "hide_loading", "error"]
    assert provider.prompts == []


def test_issue_without_description_can_be_validated_locally():
    provider = FakeProvider(output="[]")
    orchestrator, feedback = _orchestrator(provider, validate_issue_prompt=True)

    assert _run(orchestrator, orchestrator.generate_from_issue(Issue(key="SE2-1"))) is None
    assert feedback.kinds() == ["inline_error"]
