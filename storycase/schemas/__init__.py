from storycase.schemas.issue import Issue, IssuePage
from storycase.schemas.testcase import (
    ErrorResponse,
    ExecutionStatus,
    GenerateRequest,
    GenerateResponse,
    Priority,
    TestCase,
    normalize_priority,
)

__all__ = [
    "ErrorResponse",
    "ExecutionStatus",
    "GenerateRequest",
    "GenerateResponse",
    "Issue",
    "IssuePage",
    "Priority",
    "TestCase",
    "normalize_priority",
]
