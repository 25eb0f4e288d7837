"""Orchestrates the create and update synchronization workflows."""

import time
from pathlib import Path

import structlog

from github_repo_manager.github.adapter import GitHubKitAdapter
from github_repo_manager.synchronize.engine import SyncEngine
from github_repo_manager.synchronize.models import Credentials, RepositoryTarget, Visibility
from github_repo_manager.synchronize.results import SyncResult
from github_repo_manager.utils.constants import DEFAULT_BRANCH, DEFAULT_GITHUB_API_URL
from github_repo_manager.utils.github import split_repository_in_configuration, web_url_from_api_url

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def build_sync_engine(credentials: Credentials, github_api_url: str) -> SyncEngine:
    """Set up the GitHub adapter and wrap it in a SyncEngine."""
    github_adapter = await GitHubKitAdapter.create(credentials=credentials, github_api_url=github_api_url)
    return SyncEngine(github_adapter, web_url=web_url_from_api_url(github_api_url))


async def run_create_workflow(
    working_dir: Path,
    repo: str,
    credentials: Credentials,
    description: str = "",
    visibility: Visibility = Visibility.PUBLIC,
    license_choice: str = "none",
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    branch: str = DEFAULT_BRANCH,
    allow_existing: bool = False,
    engine: SyncEngine | None = None,
) -> SyncResult:
    """Run the create workflow: create the remote repository and publish the working directory to it."""
    owner, name = await split_repository_in_configuration(repo, default_owner=credentials.username)
    target = RepositoryTarget(owner=owner, name=name, description=description, visibility=visibility, license_choice=license_choice)
    if engine is None:
        engine = await build_sync_engine(credentials, github_api_url)

    start_time = time.time()
    logger.info("Running create workflow", repository=target.full_name, working_dir=str(working_dir), license=license_choice)
    result = await engine.run_create_workflow(working_dir, target, credentials, branch=branch, allow_existing=allow_existing)
    logger.info(
        "Finished create workflow",
        repository=target.full_name,
        state=result.state.value,
        created_new=result.created_new,
        commit_made=result.commit_made,
        pushed=result.pushed,
        duration=round(time.time() - start_time, 2),
    )
    return result


async def run_update_workflow(
    working_dir: Path,
    repo: str,
    credentials: Credentials,
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    branch: str = DEFAULT_BRANCH,
    engine: SyncEngine | None = None,
) -> SyncResult:
    """Run the update workflow: commit local changes and force-push them to an existing repository."""
    owner, name = await split_repository_in_configuration(repo, default_owner=credentials.username)
    target = RepositoryTarget(owner=owner, name=name)
    if engine is None:
        engine = await build_sync_engine(credentials, github_api_url)

    start_time = time.time()
    logger.info("Running update workflow", repository=target.full_name, working_dir=str(working_dir))
    result = await engine.run_update_workflow(working_dir, target, credentials, branch=branch)
    logger.info(
        "Finished update workflow",
        repository=target.full_name,
        state=result.state.value,
        commit_made=result.commit_made,
        pushed=result.pushed,
        duration=round(time.time() - start_time, 2),
    )
    return result
