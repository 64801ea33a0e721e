"""
Turn raw model text into canonical test cases.

Models often wrap JSON in markdown fences and disagree on key casing
("priority" vs "Priority"). Field lookup goes through an explicit alias
table so only the known spellings are accepted.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Mapping, Tuple

from storycase.core.errors import MalformedResponseError
from storycase.schemas.testcase import TestCase, normalize_priority

logger = logging.getLogger(__name__)

# Canonical name first; earlier aliases win when several are present.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "Id"),
    "title": ("title", "Title"),
    "preconditions": ("preconditions", "Preconditions"),
    "steps": ("steps", "Steps"),
    "expectedResult": ("expectedResult", "ExpectedResult"),
    "priority": ("priority", "Priority"),
}

_OPENING_FENCE = re.compile(r"^```[ \t]*[A-Za-z0-9_+-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """Remove leading/trailing ``` fences (with or without a language tag)."""
    stripped = text.strip()
    stripped = _OPENING_FENCE.sub("", stripped)
    stripped = _CLOSING_FENCE.sub("", stripped)
    return stripped.strip()


def lookup_field(item: Mapping[str, Any], field_name: str) -> Any:
    """
    Read ``field_name`` from a model-produced object via its known aliases.

    A value counts as present unless it is None or "". Returns "" when no
    alias holds a value.
    """
    for alias in FIELD_ALIASES[field_name]:
        value = item.get(alias)
        if value is not None and value != "":
            return value
    return ""


def _coerce_id(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return str(value)
    return value


def _coerce_text(value: Any) -> Any:
    if isinstance(value, list):
        return [str(part) for part in value]
    if isinstance(value, str):
        return value
    return str(value)


def normalize_test_case(item: Mapping[str, Any]) -> TestCase:
    fields = {name: lookup_field(item, name) for name in FIELD_ALIASES}
    fields["id"] = _coerce_id(fields["id"])
    for name in ("title", "preconditions", "steps", "expectedResult"):
        fields[name] = _coerce_text(fields[name])
    # title is a plain string on the wire
    if isinstance(fields["title"], list):
        fields["title"] = " ".join(fields["title"])
    fields["priority"] = normalize_priority(fields["priority"])
    return TestCase(**fields)


def parse_test_cases(raw_text: str) -> List[TestCase]:
    """
    Parse model output into test cases.

    Raises MalformedResponseError (carrying the raw text) when the output
    is not a JSON array of objects. An empty array is valid.
    """
    raw_preview = raw_text[:500] if len(raw_text) > 500 else raw_text
    logger.debug("LLM raw response (first 500 chars): %s", raw_preview)

    cleaned = strip_code_fences(raw_text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        snippet = (cleaned[:300] + "...") if len(cleaned) > 300 else cleaned
        logger.error("JSON parse error: %s; snippet: %s", exc, snippet)
        raise MalformedResponseError(
            f"LLM output is not valid JSON: {exc}", raw=raw_text
        ) from exc

    if not isinstance(parsed, list):
        logger.error(
            "Parsed result is not a list: type=%s", type(parsed).__name__
        )
        raise MalformedResponseError(
            f"LLM output must be a JSON array; received {type(parsed).__name__}.",
            raw=raw_text,
        )

    cases: List[TestCase] = []
    for index, item in enumerate(parsed):
        if not isinstance(item, dict):
            logger.error(
                "Element %d is not an object: type=%s", index, type(item).__name__
            )
            raise MalformedResponseError(
                f"Element {index} of the LLM output is not an object.",
                raw=raw_text,
            )
        cases.append(normalize_test_case(item))
    return cases
