import asyncio
import json

from httpx import ASGITransport, AsyncClient

from storycase.core.errors import GenerationError
from storycase.main import create_app

from .conftest import LOGIN_CASES, FakeProvider, fenced


async def _post(provider, **kwargs):
    app = create_app(provider=provider)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post("/generate", **kwargs)


def post(provider, **kwargs):
    return asyncio.run(_post(provider, **kwargs))


def test_generate_from_prompt_returns_normalized_cases():
    provider = FakeProvider(output=fenced(LOGIN_CASES))
    response = post(provider, json={"prompt": "As a user I want to log in"})

    assert response.status_code == 200
    cases = response.json()["testCases"]
    assert len(cases) >= 1
    assert all(case["priority"] in {"Low", "Medium", "High"} for case in cases)
    assert cases[1]["title"] == "Login with wrong password"
    assert "As a user I want to log in" in provider.prompts[0]


def test_description_key_is_accepted():
    provider = FakeProvider(output=json.dumps(LOGIN_CASES))
    response = post(provider, json={"description": "As an admin I manage users"})
    assert response.status_code == 200
    assert "As an admin I manage users" in provider.prompts[0]


def test_issue_payload_is_accepted():
    provider = FakeProvider(output="[]")
    response = post(
        provider,
        json={
            "prompt": "Checkout flow",
            "issue_key": "SE2-42",
            "summary": "Checkout",
            "issue_type": "Story",
            "status": "Open",
        },
    )
    assert response.status_code == 200
    assert response.json() == {"testCases": []}


def test_empty_prompt_is_a_malformed_request():
    provider = FakeProvider(output="[]")
    for body in ({"prompt": ""}, {"prompt": "   "}, {}, {"summary": "only"}):
        response = post(provider, json=body)
        assert response.status_code == 400
        assert "error" in response.json()
    assert provider.prompts == []


def test_non_json_body_is_a_malformed_request():
    response = post(
        FakeProvider(),
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_malformed_model_output_returns_raw_text():
    response = post(FakeProvider(output="not json"), json={"prompt": "story"})
    assert response.status_code == 500
    assert response.json() == {"error": "Model did not return valid JSON", "raw": "not json"}


def test_model_object_instead_of_array_is_malformed():
    raw = '{"testCases": []}'
    response = post(FakeProvider(output=raw), json={"prompt": "story"})
    assert response.status_code == 500
    assert response.json()["raw"] == raw


def test_provider_failure_returns_generic_error():
    provider = FakeProvider(error=RuntimeError("quota exceeded"))
    response = post(provider, json={"prompt": "story"})
    assert response.status_code == 500
    body = response.json()
    assert "quota exceeded" in body["error"]
    assert "raw" not in body


def test_generation_error_message_is_passed_through():
    provider = FakeProvider(error=GenerationError("upstream down"))
    response = post(provider, json={"prompt": "story"})
    assert response.status_code == 500
    assert "upstream down" in response.json()["error"]
