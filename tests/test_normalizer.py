import json

import pytest

from storycase.core.errors import MalformedResponseError
from storycase.services.normalizer import lookup_field, parse_test_cases, strip_code_fences

from .conftest import LOGIN_CASES, fenced


def _dump(cases):
    return [case.model_dump() for case in cases]


def test_fenced_and_unfenced_arrays_parse_the_same():
    unfenced = json.dumps(LOGIN_CASES)
    assert _dump(parse_test_cases(fenced(LOGIN_CASES))) == _dump(parse_test_cases(unfenced))


@pytest.mark.parametrize(
    "text",
    [
        "```json\n[1]\n```",
        "```JSON [1]```",
        "```\n[1]\n```",
        "  \n[1]\n  ",
    ],
)
def test_strip_code_fences(text):
    assert strip_code_fences(text) == "[1]"


def test_capitalized_keys_are_aliased():
    cases = parse_test_cases(json.dumps(LOGIN_CASES))
    second = cases[1]
    assert second.title == "Login with wrong password"
    assert second.expectedResult == "An error message is shown"
    assert second.priority == "Medium"


def test_lowercase_key_wins_over_capitalized():
    item = {"priority": "Low", "Priority": "High"}
    assert lookup_field(item, "priority") == "Low"
    [case] = parse_test_cases(json.dumps([{"title": "t", **item}]))
    assert case.priority == "Low"


def test_priority_only_capitalized():
    [case] = parse_test_cases('[{"Priority": "High"}]')
    assert case.priority == "High"


def test_missing_fields_default_to_empty_string():
    [case] = parse_test_cases("[{}]")
    assert case.model_dump() == {
        "id": "",
        "title": "",
        "preconditions": "",
        "steps": "",
        "expectedResult": "",
        "priority": "",
    }


def test_normalizing_twice_is_idempotent():
    once = _dump(parse_test_cases(json.dumps(LOGIN_CASES)))
    twice = _dump(parse_test_cases(json.dumps(once)))
    assert once == twice


def test_priority_casing_is_normalized():
    cases = parse_test_cases('[{"priority": "hIGh"}, {"priority": "LOW"}, {"priority": "Critical"}]')
    assert [c.priority for c in cases] == ["High", "Low", "Critical"]


def test_step_lists_are_kept():
    [case] = parse_test_cases('[{"steps": ["Open page", "Click login"], "id": "TC-1"}]')
    assert case.steps == ["Open page", "Click login"]
    assert case.id == "TC-1"


def test_empty_array_is_not_an_error():
    assert parse_test_cases("```json\n[]\n```") == []


@pytest.mark.parametrize("raw", ["not json", "", '{"testCases": []}', "[1, 2]"])
def test_malformed_output_keeps_raw_text(raw):
    with pytest.raises(MalformedResponseError) as excinfo:
        parse_test_cases(raw)
    assert excinfo.value.raw == raw
