from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from storycase.client.errors import ValidationError
from storycase.client.feedback import FeedbackSink
from storycase.schemas.testcase import (
    ExecutionStatus,
    Priority,
    TestCase,
    TestCaseId,
    normalize_priority,
)
from storycase.utils.excel_exporter import rows_to_excel

logger = logging.getLogger(__name__)

EMPTY_STATE_MESSAGE = "No test cases generated yet."
DELETED_MESSAGE = "Test case deleted successfully"
NOT_AVAILABLE = "N/A"
DEFAULT_PRIORITY = Priority.MEDIUM.value

PRIORITY_COLORS = {
    "critical": "#E2483D",
    "highest": "#E2483D",
    "high": "#E2483D",
    "major": "#F68909",
    "medium": "#F68909",
    "minor": "#4688EC",
    "low": "#4688EC",
    "lowest": "#6C757D",
}
DEFAULT_BADGE_COLOR = "#6C757D"

_STEP_NUMBER = re.compile(r"^\s*\d+[.)]\s*")

TextOrLines = Union[str, List[str]]
Exporter = Callable[..., str]


@dataclass
class TestCaseRow:
    __test__ = False

    id: TestCaseId
    title: str
    steps: TextOrLines
    expected_result: TextOrLines
    priority: str
    preconditions: TextOrLines = ""
    execution_status: ExecutionStatus = ExecutionStatus.UNEXECUTED


@dataclass(frozen=True)
class Badge:
    label: str
    color: str


@dataclass(frozen=True)
class RenderedRow:
    id: str
    title: str
    steps: str
    expected_result: str
    priority: Badge
    execution_status: str


@dataclass(frozen=True)
class TableView:
    rows: List[RenderedRow]
    count: int
    export_enabled: bool
    empty_message: Optional[str] = None


def priority_badge(priority: Optional[str]) -> Badge:
    if not priority:
        return Badge(NOT_AVAILABLE, DEFAULT_BADGE_COLOR)
    label = normalize_priority(priority)
    if label not in {p.value for p in Priority}:
        label = label[:1].upper() + label[1:].lower()
    return Badge(label, PRIORITY_COLORS.get(label.lower(), DEFAULT_BADGE_COLOR))


def format_steps(steps: TextOrLines) -> str:
    """Render steps as numbered lines, renumbering any existing prefixes."""
    if isinstance(steps, list):
        lines = [str(step).strip() for step in steps]
    else:
        lines = str(steps).splitlines()
    lines = [_STEP_NUMBER.sub("", line).strip() for line in lines]
    lines = [line for line in lines if line]
    if not lines:
        return NOT_AVAILABLE
    if len(lines) == 1:
        return lines[0]
    return "\n".join(f"{i}. {line}" for i, line in enumerate(lines, start=1))


def _as_text(value: TextOrLines) -> str:
    if isinstance(value, list):
        return "\n".join(str(part) for part in value)
    return str(value)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, list):
        return not any(str(part).strip() for part in value)
    return not str(value).strip()


def _numeric_id(value: TestCaseId) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    return int(text) if text.isdecimal() else None


class TestCaseTable:
    """
    In-memory list of the test cases on screen.

    Order is insertion order. Manually added rows take ids from a counter
    that only moves forward: it starts past the largest numeric id seen so
    far, so deleting a row never frees its id for reuse. Non-numeric ids
    from the model (e.g. "TC-3") are left alone and never collide with
    the integers handed out here.
    """

    __test__ = False

    def __init__(self, feedback: Optional[FeedbackSink] = None) -> None:
        self._rows: List[TestCaseRow] = []
        self._last_id = 0
        self._feedback = feedback or FeedbackSink()

    @property
    def rows(self) -> List[TestCaseRow]:
        return list(self._rows)

    @property
    def count(self) -> int:
        return len(self._rows)

    @property
    def is_empty(self) -> bool:
        return not self._rows

    @property
    def export_enabled(self) -> bool:
        return bool(self._rows)

    def get(self, test_case_id: TestCaseId) -> TestCaseRow:
        key = str(test_case_id)
        for row in self._rows:
            if str(row.id) == key:
                return row
        raise KeyError(f"Test case {test_case_id} not found")

    def replace(self, test_cases: Iterable[Union[TestCase, Mapping[str, Any]]]) -> None:
        """Swap the whole table for a fresh generation result."""
        rows: List[TestCaseRow] = []
        for index, raw in enumerate(test_cases):
            case = raw if isinstance(raw, TestCase) else TestCase.model_validate(raw)
            position = index + 1
            rows.append(
                TestCaseRow(
                    id=case.id if not _is_blank(case.id) else f"TC-{position}",
                    title=case.title if not _is_blank(case.title) else f"Test Case {position}",
                    steps=case.steps if not _is_blank(case.steps) else NOT_AVAILABLE,
                    expected_result=(
                        case.expectedResult
                        if not _is_blank(case.expectedResult)
                        else NOT_AVAILABLE
                    ),
                    priority=normalize_priority(case.priority) or DEFAULT_PRIORITY,
                    preconditions=case.preconditions,
                )
            )
        self._rows = rows
        self._bump_counter()
        logger.debug("Table replaced with %d row(s)", len(rows))

    def add(
        self,
        title: str,
        steps: TextOrLines,
        expected_result: TextOrLines,
        priority: str = DEFAULT_PRIORITY,
    ) -> TestCaseRow:
        self._require(title=title, steps=steps, expected_result=expected_result)
        self._bump_counter()
        self._last_id += 1
        row = TestCaseRow(
            id=self._last_id,
            title=title.strip(),
            steps=steps,
            expected_result=expected_result,
            priority=normalize_priority(priority) or DEFAULT_PRIORITY,
        )
        self._rows.append(row)
        return row

    def edit(
        self,
        test_case_id: TestCaseId,
        *,
        title: Optional[str] = None,
        steps: Optional[TextOrLines] = None,
        expected_result: Optional[TextOrLines] = None,
        priority: Optional[str] = None,
    ) -> TestCaseRow:
        row = self.get(test_case_id)
        provided = {
            name: value
            for name, value in (
                ("title", title),
                ("steps", steps),
                ("expected_result", expected_result),
            )
            if value is not None
        }
        self._require(**provided)
        for name, value in provided.items():
            setattr(row, name, value.strip() if isinstance(value, str) else value)
        if priority is not None:
            row.priority = normalize_priority(priority) or DEFAULT_PRIORITY
        return row

    def delete(self, test_case_id: TestCaseId) -> TestCaseRow:
        row = self.get(test_case_id)
        # ids are not unique; drop this exact row, not an equal-looking one
        self._rows = [r for r in self._rows if r is not row]
        self._feedback.update_count(self.count)
        self._feedback.show_success(DELETED_MESSAGE)
        return row

    def set_execution_status(
        self,
        test_case_id: TestCaseId,
        status: Union[ExecutionStatus, str],
    ) -> TestCaseRow:
        row = self.get(test_case_id)
        try:
            row.execution_status = ExecutionStatus(str(getattr(status, "value", status)).upper())
        except ValueError as exc:
            allowed = ", ".join(s.value for s in ExecutionStatus)
            raise ValidationError(
                f"Unknown execution status {status!r}; use one of {allowed}."
            ) from exc
        return row

    def export_rows(self, include_execution_status: bool = True) -> List[List[str]]:
        rows: List[List[str]] = []
        for row in self._rows:
            values = [
                str(row.id),
                row.title,
                format_steps(row.steps),
                _as_text(row.expected_result),
                priority_badge(row.priority).label,
            ]
            if include_execution_status:
                values.append(row.execution_status.value)
            rows.append(values)
        return rows

    def export_all(
        self,
        *,
        include_execution_status: bool = True,
        directory: Optional[Path] = None,
        exporter: Exporter = rows_to_excel,
    ) -> str:
        """Hand every row, in order, to the spreadsheet exporter."""
        if not self.export_enabled:
            raise ValidationError("No test cases to export")
        path = exporter(
            self.export_rows(include_execution_status),
            include_execution_status=include_execution_status,
            directory=directory,
        )
        logger.info("Exported %d test case(s) to %s", self.count, path)
        return path

    def render(self) -> TableView:
        if self.is_empty:
            return TableView(rows=[], count=0, export_enabled=False, empty_message=EMPTY_STATE_MESSAGE)
        rendered = [
            RenderedRow(
                id=str(row.id),
                title=row.title,
                steps=format_steps(row.steps),
                expected_result=_as_text(row.expected_result),
                priority=priority_badge(row.priority),
                execution_status=row.execution_status.value,
            )
            for row in self._rows
        ]
        return TableView(rows=rendered, count=len(rendered), export_enabled=True)

    def _bump_counter(self) -> None:
        numeric = [n for n in (_numeric_id(row.id) for row in self._rows) if n is not None]
        if numeric:
            self._last_id = max(self._last_id, max(numeric))

    @staticmethod
    def _require(**fields: Any) -> None:
        labels = {"title": "Title", "steps": "Steps", "expected_result": "Expected result"}
        for name, value in fields.items():
            if _is_blank(value):
                raise ValidationError(f"{labels[name]} is required.")
