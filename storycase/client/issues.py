from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from storycase.client.errors import TrackerError
from storycase.client.feedback import FeedbackSink, LoggingFeedback
from storycase.client.table import Badge, priority_badge
from storycase.core.config import get_settings
from storycase.schemas.issue import Issue, IssuePage

logger = logging.getLogger(__name__)

ISSUE_BROWSE_URL = "https://arrowecommerce.atlassian.net/browse/{key}"
NO_ISSUES_MESSAGE = "No issues found"
DEFAULT_ISSUE_TYPE = "Story"

STATUS_COLORS = {
    "to-do": "#BFC1C4",
    "open": "#CECFD2",
    "in progress": "#8FB8F6",
    "closed": "#B3DF72",
    "done": "#B3DF72",
}
ISSUE_TYPE_COLORS = {
    "story": "#82B536",
    "bug": "#E2483D",
    "new feature": "#82B536",
    "sub-task": "#4688EC",
    "subtask": "#4688EC",
    "test": "#8FB8F6",
}
NEUTRAL_COLOR = "#E9ECEF"


@dataclass
class IssueFilters:
    issue_type: str = DEFAULT_ISSUE_TYPE
    component: str = ""
    sprint: str = ""
    jql: str = ""

    def to_jql(self) -> str:
        """Free JQL wins; otherwise AND together the individual filters."""
        if self.jql.strip():
            return self.jql.strip()
        clauses = []
        if self.issue_type:
            clauses.append(f'issuetype = "{self.issue_type}"')
        if self.component:
            clauses.append(f'component = "{self.component}"')
        if self.sprint:
            clauses.append(f'sprint = "{self.sprint}"')
        return " AND ".join(clauses)


@dataclass
class BrowserState:
    """Pagination and filter state owned by one IssueBrowser."""

    filters: IssueFilters
    start_at: int = 0
    total: int = 0


@dataclass(frozen=True)
class IssueRow:
    key: str
    url: str
    summary: str
    description: str
    issue_type: Badge
    status: Badge
    priority: Badge
    assignee: str
    reporter: str
    issue: Issue


@dataclass(frozen=True)
class IssueListView:
    rows: List[IssueRow]
    count_label: str
    has_previous: bool
    has_next: bool
    empty_message: Optional[str] = None


def truncate(text: Optional[str], max_length: int = 100) -> str:
    if not text:
        return ""
    return text[:max_length] + "..." if len(text) > max_length else text


def _badge(value: Optional[str], colors: Dict[str, str]) -> Badge:
    label = value or "N/A"
    return Badge(label, colors.get((value or "").lower(), NEUTRAL_COLOR))


class IssueBrowser:
    """
    Paginated, filterable view over the issue tracker's listing endpoints.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        project_key: Optional[str] = None,
        page_size: Optional[int] = None,
        board_id: Optional[int] = None,
        feedback: Optional[FeedbackSink] = None,
    ) -> None:
        settings = get_settings()
        self._client = client
        self.project_key = project_key or settings.tracker_project_key
        self.page_size = page_size or settings.issue_page_size
        self.board_id = board_id if board_id is not None else settings.tracker_board_id
        self._feedback = feedback or LoggingFeedback()
        self.state = BrowserState(filters=IssueFilters())
        self.page = IssuePage()

    @classmethod
    def from_settings(cls, feedback: Optional[FeedbackSink] = None) -> "IssueBrowser":
        settings = get_settings()
        client = httpx.AsyncClient(
            base_url=settings.tracker_base_url,
            timeout=settings.client_timeout_seconds,
        )
        return cls(client, feedback=feedback)

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- listing endpoints ---

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise TrackerError(f"Request to {path} failed: {exc}") from exc

    async def fetch_page(self) -> IssuePage:
        filters = self.state.filters
        params: Dict[str, Any] = {
            "project_key": self.project_key,
            "start_at": self.state.start_at,
            "max_results": self.page_size,
        }
        if filters.issue_type:
            params["issue_type"] = filters.issue_type
        if filters.component:
            params["component"] = filters.component
        if filters.sprint:
            params["sprint"] = filters.sprint
        jql = filters.to_jql()
        if jql:
            params["jql_filter"] = jql
        data = await self._get_json("/test-cases/paginated", params)
        try:
            return IssuePage.model_validate(data)
        except ValueError as exc:
            raise TrackerError(f"Unexpected issue listing: {exc}") from exc

    async def load_page(self) -> IssueListView:
        """Fetch the current page; on failure show the error and an empty list."""
        self._feedback.show_loading("Please wait while we load your issues...")
        try:
            self.page = await self.fetch_page()
        except TrackerError as exc:
            logger.error("Error fetching issues: %s", exc)
            self._feedback.show_error(str(exc))
            self.page = IssuePage()
        finally:
            self._feedback.hide_loading()
        if self.page.issues:
            self.state.total = self.page.total
        return self.render_rows()

    async def apply_filters(self, filters: IssueFilters) -> IssueListView:
        self.state.filters = filters
        self.state.start_at = 0
        return await self.load_page()

    async def clear_filters(self) -> IssueListView:
        return await self.apply_filters(IssueFilters())

    async def next_page(self) -> Optional[IssueListView]:
        if self.state.start_at + self.page_size >= self.state.total:
            return None
        self.state.start_at += self.page_size
        return await self.load_page()

    async def previous_page(self) -> Optional[IssueListView]:
        if self.state.start_at < self.page_size:
            return None
        self.state.start_at -= self.page_size
        return await self.load_page()

    async def _list_names(self, path: str, params: Dict[str, Any], *keys: str) -> List[str]:
        """Names from a listing endpoint; on failure show the error and return []."""
        try:
            data = await self._get_json(path, params)
        except TrackerError as exc:
            logger.error("Error loading %s: %s", path, exc)
            self._feedback.show_error(str(exc))
            return []
        return [item["name"] for item in _items(data, *keys) if item.get("name")]

    async def list_components(self) -> List[str]:
        return await self._list_names("/components", {"project_key": self.project_key})

    async def list_boards(self) -> List[str]:
        return await self._list_names("/boards", {"project_key": self.project_key})

    async def list_sprints(self) -> List[str]:
        return await self._list_names("/sprints/ordered", {"board_id": self.board_id}, "sprints")

    # --- rendering ---

    def render_rows(self) -> IssueListView:
        issues = self.page.issues
        if not issues:
            return IssueListView(
                rows=[],
                count_label="0 items",
                has_previous=self.state.start_at > 0,
                has_next=False,
                empty_message=NO_ISSUES_MESSAGE,
            )
        total = self.state.total
        start_item = self.state.start_at + 1
        end_item = min(self.state.start_at + len(issues), total)
        rows = [
            IssueRow(
                key=issue.key or "N/A",
                url=ISSUE_BROWSE_URL.format(key=issue.key),
                summary=truncate(issue.summary, 50),
                description=truncate(issue.description, 100),
                issue_type=_badge(issue.issue_type, ISSUE_TYPE_COLORS),
                status=_badge(issue.status, STATUS_COLORS),
                priority=priority_badge(issue.priority),
                assignee=issue.assignee or "Unassigned",
                reporter=issue.reporter or "N/A",
                issue=issue,
            )
            for issue in issues
        ]
        return IssueListView(
            rows=rows,
            count_label=f"{start_item}-{end_item} of {total} items",
            has_previous=self.state.start_at > 0,
            has_next=self.state.start_at + self.page_size < total,
        )


def _items(data: Any, *keys: str) -> List[Dict[str, Any]]:
    """Listing endpoints answer with a flat array or wrap it in sprints/items."""
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    if isinstance(data, dict):
        for key in (*keys, "items"):
            value = data.get(key)
            if isinstance(value, list):
                return [item for item in value if isinstance(item, dict)]
    return []
