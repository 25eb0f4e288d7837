"""Read-only views of a remote repository: its metadata and an issue summary."""

from typing import Literal

import structlog

from github_repo_manager.github.abc import HostingClientBase
from github_repo_manager.repository.models import IssueEntry, IssuesSummary, RepositoryInfo

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def get_repository_info(client: HostingClientBase, owner: str, name: str) -> RepositoryInfo:
    """Fetch a repository and summarize it. Raises RepositoryNotFoundError if it is absent."""
    data = await client.get_repository(owner, name)
    info = RepositoryInfo.from_api(data)
    logger.info("Fetched repository information", repository=info.full_name, stars=info.stars, forks=info.forks)
    return info


async def summarize_issues(
    client: HostingClientBase,
    owner: str,
    name: str,
    state: Literal["open", "closed", "all"] = "all",
) -> IssuesSummary:
    """Count the open and closed issues of a repository.

    GitHub returns pull requests from the issues endpoint too; they are counted and flagged.
    """
    raw_issues = await client.list_issues(owner, name, state=state)
    entries = [
        IssueEntry(
            number=issue["number"],
            state=issue.get("state", "open"),
            title=issue.get("title", ""),
            is_pull_request="pull_request" in issue,
        )
        for issue in raw_issues
    ]
    open_count = sum(1 for entry in entries if entry.state == "open")
    summary = IssuesSummary(
        full_name=f"{owner}/{name}",
        total=len(entries),
        open=open_count,
        closed=len(entries) - open_count,
        issues=entries,
    )
    logger.info("Summarized issues", repository=summary.full_name, total=summary.total, open=summary.open, closed=summary.closed)
    return summary
