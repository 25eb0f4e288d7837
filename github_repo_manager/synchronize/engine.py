"""Repository synchronization engine.

Ensures a remote repository exists, reconciles the local working tree into a single
commit, links the remote and force-pushes, recording the outcome of every step in a
SyncResult. Steps that already completed are never rolled back when a later step fails.
"""

import datetime
from pathlib import Path
from typing import Any

import structlog

from github_repo_manager.git.exceptions import GitCommandError, GitExecutableNotFoundError
from github_repo_manager.git.repository import GitRepository, basic_auth_config
from github_repo_manager.github.abc import HostingClientBase
from github_repo_manager.synchronize import licenses
from github_repo_manager.synchronize.exceptions import (
    ApiError,
    ConflictError,
    GitOperationError,
    NotARepositoryError,
    PushError,
    RepositoryNotFoundError,
    SyncError,
    UnsupportedLicenseError,
    WorkingDirectoryError,
)
from github_repo_manager.synchronize.models import (
    CommitOutcome,
    Credentials,
    LicenseChoice,
    RemoteStatus,
    RepositoryTarget,
    SyncState,
)
from github_repo_manager.synchronize.results import UPDATE_TRANSITIONS, SyncResult
from github_repo_manager.utils.constants import (
    DEFAULT_BRANCH,
    DEFAULT_GITHUB_WEB_URL,
    INITIAL_COMMIT_MESSAGE,
    README_FILE_NAME,
    REMOTE_NAME,
)
from github_repo_manager.utils.github import build_clone_url
from github_repo_manager.utils.helpers import generate_update_commit_message, redact_secrets

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class SyncEngine:
    """Runs the create and update synchronization workflows against a hosting client."""

    def __init__(self, client: HostingClientBase, web_url: str = DEFAULT_GITHUB_WEB_URL) -> None:
        """Initialize the engine with a hosting client and the web URL used to derive clone URLs."""
        self.client = client
        self.web_url = web_url

    def _remote_status(self, target: RepositoryTarget, repository: dict[str, Any], existed: bool) -> RemoteStatus:
        html_url = repository.get("html_url") or f"{self.web_url.rstrip('/')}/{target.full_name}"
        clone_url = repository.get("clone_url") or build_clone_url(self.web_url, target.owner, target.name)
        return RemoteStatus(existed=existed, url=html_url, clone_url=clone_url)

    @staticmethod
    def _require_repository(working_dir: Path) -> GitRepository:
        repository = GitRepository(working_dir)
        if not repository.is_repository():
            raise NotARepositoryError(str(working_dir))
        return repository

    async def ensure_remote(
        self,
        target: RepositoryTarget,
        credentials: Credentials,
        create: bool = True,
        fail_if_exists: bool = False,
    ) -> RemoteStatus:
        """Make sure the remote repository exists, creating it when requested.

        Existence is always checked first; nothing about prior state is assumed.

        Raises:
            AuthError: The credentials were rejected.
            ConflictError: The repository exists and fail_if_exists is set, or creation collided with an existing name.
            RepositoryNotFoundError: The repository is absent and create is False.
            ApiError: The repository is absent and its owner is not the authenticated user.
            ApiError: Any other non-success response.
        """
        logger.info("Checking for remote repository", repository=target.full_name, username=credentials.username)
        try:
            repository = await self.client.get_repository(target.owner, target.name)
        except RepositoryNotFoundError:
            if not create:
                logger.error("Remote repository does not exist", repository=target.full_name)
                raise
        else:
            if fail_if_exists:
                raise ConflictError(
                    f"Repository '{target.full_name}' already exists. Please choose a different name.",
                    status_code=None,
                    provider_message=None,
                )
            logger.info("Remote repository already exists", repository=target.full_name)
            return self._remote_status(target, repository, existed=True)

        if target.owner != credentials.username:
            # POST /user/repos always creates under the authenticated user.
            logger.error("Cannot create a repository for another owner", owner=target.owner, username=credentials.username)
            raise ApiError(
                f"Repository '{target.full_name}' does not exist and can only be created for the authenticated user '{credentials.username}'."
            )
        created = await self.client.create_repository(target.name, description=target.description, private=target.private)
        status = self._remote_status(target, created, existed=False)
        logger.info("Created remote repository", repository=target.full_name, url=status.url, private=target.private)
        return status

    def materialize_license(self, choice: str | LicenseChoice, owner: str, year: int | None = None) -> str:
        """Return the literal licence text for a choice (see `licenses.materialize_license`)."""
        return licenses.materialize_license(choice, owner, year)

    async def write_license(self, working_dir: Path, choice: str | LicenseChoice, owner: str, year: int | None = None) -> Path:
        """Write the LICENSE file. Raises UnsupportedLicenseError without touching the directory."""
        return licenses.write_license_file(working_dir, choice, owner, year)

    async def prepare_working_tree(self, working_dir: Path) -> GitRepository:
        """Create a minimal README when missing and initialize the repository when needed."""
        readme_path = working_dir / README_FILE_NAME
        if not readme_path.exists():
            readme_path.write_text(f"# {working_dir.resolve().name}\nProject description\n", encoding="utf-8")
            logger.info("Created minimal README", path=str(readme_path))
        repository = GitRepository(working_dir)
        if not repository.is_repository():
            repository.init()
            logger.info("Initialized new git repository", working_dir=str(working_dir))
        return repository

    async def stage_and_commit(self, working_dir: Path, message: str) -> CommitOutcome:
        """Stage every file except the metadata directory and commit if anything changed.

        A clean working tree is not a failure: it yields committed=False and no new commit.
        """
        repository = self._require_repository(working_dir)
        repository.add_all()
        if not repository.has_changes():
            logger.warning("No changes to commit", working_dir=str(working_dir))
            return CommitOutcome(committed=False)
        sha = repository.commit(message)
        logger.info("Created commit", working_dir=str(working_dir), sha=sha, message=message)
        return CommitOutcome(committed=True, sha=sha)

    async def checkout_branch(self, working_dir: Path, branch: str = DEFAULT_BRANCH) -> None:
        """Create or reset the branch at HEAD and switch to it."""
        repository = self._require_repository(working_dir)
        repository.checkout_branch(branch)

    async def link_remote(self, working_dir: Path, remote_url: str) -> None:
        """Point the canonical remote at a URL, replacing any existing link."""
        repository = self._require_repository(working_dir)
        if repository.get_remote_url(REMOTE_NAME) is not None:
            repository.remove_remote(REMOTE_NAME)
            logger.info("Removed existing remote link", remote=REMOTE_NAME)
        repository.add_remote(REMOTE_NAME, remote_url)
        logger.info("Linked remote", remote=REMOTE_NAME, url=redact_secrets(remote_url, []))

    async def push(self, working_dir: Path, credentials: Credentials, branch: str = DEFAULT_BRANCH) -> None:
        """Force-push the branch to the canonical remote. Never retried.

        Raises:
            PushError: git exited non-zero; carries the transport's message.
        """
        repository = self._require_repository(working_dir)
        try:
            repository.push(REMOTE_NAME, branch, force=True, set_upstream=True, config=basic_auth_config(credentials.username, credentials.token))
        except GitCommandError as exc:
            message = redact_secrets(exc.stderr.strip() or str(exc), [credentials.token])
            raise PushError(f"Failed to push {branch} to {REMOTE_NAME}: {message}") from exc
        logger.info("Pushed branch", remote=REMOTE_NAME, branch=branch)

    async def _run_step(self, result: SyncResult, step: str, coroutine: Any) -> Any:
        """Await a workflow step, recording any failure on the result and re-raising it."""
        try:
            return await coroutine
        except (GitCommandError, GitExecutableNotFoundError) as exc:
            error: SyncError = GitOperationError(str(exc))
            result.record_failure(step, error)
            logger.error("Synchronization step failed", step=step, error=str(error))
            raise error from exc
        except OSError as exc:
            error = WorkingDirectoryError(f"Could not update the working directory: {exc}")
            result.record_failure(step, error)
            logger.error("Synchronization step failed", step=step, error=str(error))
            raise error from exc
        except SyncError as exc:
            result.record_failure(step, exc)
            logger.error("Synchronization step failed", step=step, error_type=type(exc).__name__, error=str(exc))
            raise

    async def run_create_workflow(
        self,
        working_dir: Path,
        target: RepositoryTarget,
        credentials: Credentials,
        branch: str = DEFAULT_BRANCH,
        allow_existing: bool = False,
        year: int | None = None,
    ) -> SyncResult:
        """Create the remote repository and publish the working directory to it.

        ensure_remote -> licence (best-effort) -> stage_and_commit -> link_remote -> push.
        A created remote is kept when a later step fails.
        """
        result = SyncResult()
        try:
            status = await self._run_step(
                result, "ensure_remote", self.ensure_remote(target, credentials, create=True, fail_if_exists=not allow_existing)
            )
            result.advance(SyncState.REMOTE_CHECKED)
            result.remote_url = status.url
            result.created_new = not status.existed
            result.advance(SyncState.REMOTE_CREATED if result.created_new else SyncState.REMOTE_CONFIRMED)

            await self._run_step(result, "prepare_working_tree", self.prepare_working_tree(working_dir))

            if target.license_choice != LicenseChoice.NONE.value:
                year = year if year is not None else datetime.date.today().year
                try:
                    await self._run_step(result, "materialize_license", self.write_license(working_dir, target.license_choice, target.owner, year))
                except UnsupportedLicenseError:
                    logger.warning("Could not create LICENSE file, continuing without it", license=target.license_choice)

            outcome = await self._run_step(result, "stage_and_commit", self.stage_and_commit(working_dir, INITIAL_COMMIT_MESSAGE))
            result.commit_made = outcome.committed
            await self._run_step(result, "checkout_branch", self.checkout_branch(working_dir, branch))
            result.advance(SyncState.COMMITTED)

            await self._run_step(result, "link_remote", self.link_remote(working_dir, status.clone_url))
            result.advance(SyncState.LINKED)

            await self._run_step(result, "push", self.push(working_dir, credentials, branch))
            result.pushed = True
            result.advance(SyncState.PUSHED)
        except SyncError:
            logger.error(
                "Create workflow aborted",
                repository=target.full_name,
                created_new=result.created_new,
                commit_made=result.commit_made,
            )
            return result
        logger.info("Create workflow completed", repository=target.full_name, url=result.remote_url)
        return result

    async def run_update_workflow(
        self,
        working_dir: Path,
        target: RepositoryTarget,
        credentials: Credentials,
        branch: str = DEFAULT_BRANCH,
        message: str | None = None,
    ) -> SyncResult:
        """Publish local changes to an existing remote repository.

        ensure_remote (existence only) -> link_remote -> stage_and_commit -> push. No licence regeneration.
        """
        result = SyncResult(UPDATE_TRANSITIONS)
        if message is None:
            message = generate_update_commit_message()
        try:
            status = await self._run_step(result, "ensure_remote", self.ensure_remote(target, credentials, create=False))
            result.advance(SyncState.REMOTE_CHECKED)
            result.remote_url = status.url
            result.advance(SyncState.REMOTE_CONFIRMED)

            await self._run_step(result, "link_remote", self.link_remote(working_dir, status.clone_url))
            result.advance(SyncState.LINKED)

            outcome = await self._run_step(result, "stage_and_commit", self.stage_and_commit(working_dir, message))
            result.commit_made = outcome.committed
            result.advance(SyncState.COMMITTED)

            await self._run_step(result, "push", self.push(working_dir, credentials, branch))
            result.pushed = True
            result.advance(SyncState.PUSHED)
        except SyncError:
            logger.error("Update workflow aborted", repository=target.full_name, commit_made=result.commit_made)
            return result
        logger.info("Update workflow completed", repository=target.full_name, url=result.remote_url)
        return result
