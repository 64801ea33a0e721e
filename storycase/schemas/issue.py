from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Issue(BaseModel):
    """One row of the issue tracker's paginated listing."""

    model_config = ConfigDict(extra="ignore")

    key: str = ""
    summary: Optional[str] = None
    description: Optional[str] = None
    issue_type: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee: Optional[str] = None
    reporter: Optional[str] = None


class IssuePage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    issues: List[Issue] = Field(default_factory=list)
    total: int = 0
