"""Pydantic models describing repositories and their issues."""

from typing import Any

from pydantic import BaseModel


def _date_part(timestamp: Any) -> str | None:
    if not timestamp:
        return None
    return str(timestamp).split("T", 1)[0]


class RepositoryInfo(BaseModel):
    """Summary of a repository as shown by the info command."""

    full_name: str
    description: str | None = None
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    url: str
    private: bool = False
    created: str | None = None
    updated: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RepositoryInfo":
        """Build the summary from a GET /repos/{owner}/{name} response body."""
        return cls(
            full_name=data.get("full_name") or data.get("name", ""),
            description=data.get("description"),
            stars=data.get("stargazers_count") or 0,
            forks=data.get("forks_count") or 0,
            open_issues=data.get("open_issues_count") or 0,
            url=data.get("html_url", ""),
            private=bool(data.get("private", False)),
            created=_date_part(data.get("created_at")),
            updated=_date_part(data.get("updated_at")),
        )


class IssueEntry(BaseModel):
    """A single issue (or pull request) of a repository."""

    number: int
    state: str
    title: str
    is_pull_request: bool = False


class IssuesSummary(BaseModel):
    """Counts of open and closed issues of a repository."""

    full_name: str
    total: int
    open: int
    closed: int
    issues: list[IssueEntry]
