from enum import Enum
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ExecutionStatus(str, Enum):
    """Client-only run-state annotation; never sent to the server."""

    UNEXECUTED = "UNEXECUTED"
    PASS = "PASS"
    FAIL = "FAIL"
    BLOCKED = "BLOCKED"


_PRIORITY_BY_LOWER = {p.value.lower(): p.value for p in Priority}


def normalize_priority(value: object) -> str:
    """
    Case-normalize a priority: "high" / "HIGH" -> "High".

    Values outside Low|Medium|High are returned stripped but otherwise
    unchanged; missing values become "".
    """
    if value is None:
        return ""
    text = str(value).strip()
    return _PRIORITY_BY_LOWER.get(text.lower(), text)


TestCaseId = Union[int, str]
TextOrLines = Union[str, List[str]]


class TestCase(BaseModel):
    """
    Canonical test case shape returned by the generation service.

    Field names are camelCase on the wire to match the browser client.
    """

    __test__ = False

    id: TestCaseId = ""
    title: str = ""
    preconditions: TextOrLines = ""
    steps: TextOrLines = ""
    expectedResult: TextOrLines = ""
    priority: str = ""


class GenerateRequest(BaseModel):
    """
    Body of POST /generate.

    The free-text form posts ``description``; the issue form posts
    ``prompt`` plus issue metadata (snake_case or camelCase).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    prompt: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("prompt", "description"),
    )
    issue_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("issue_key", "issueKey"),
    )
    summary: Optional[str] = None
    issue_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("issue_type", "issueType"),
    )
    status: Optional[str] = None


class GenerateResponse(BaseModel):
    testCases: List[TestCase]


class ErrorResponse(BaseModel):
    error: str
    raw: Optional[str] = None
