"""Clones a repository into a directory, reporting progress to an optional observer."""

import shutil
from pathlib import Path

import structlog

from github_repo_manager.git.exceptions import GitCommandError, GitExecutableNotFoundError
from github_repo_manager.git.repository import GitRepository, ProgressObserver, basic_auth_config
from github_repo_manager.repository.exceptions import CloneError, DestinationExistsError
from github_repo_manager.synchronize.models import Credentials
from github_repo_manager.utils.constants import CLONE_PROGRESS_PATTERN
from github_repo_manager.utils.github import repository_name_from_url

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def parse_progress_percentage(line: str) -> int | None:
    """Return the percentage reported by a `git clone --progress` line, if any."""
    match = CLONE_PROGRESS_PATTERN.search(line)
    if match is None:
        return None
    return min(int(match.group(1)), 100)


def clone_repository(
    url: str,
    destination_dir: Path,
    credentials: Credentials | None = None,
    overwrite: bool = False,
    progress: ProgressObserver | None = None,
) -> Path:
    """Clone a repository into destination_dir/<repository name>.

    Progress reporting is advisory; it does not affect the outcome.

    Raises:
        DestinationExistsError: The target directory exists and overwrite is False.
        CloneError: git exited non-zero.
    """
    target = Path(destination_dir).expanduser() / repository_name_from_url(url)
    if target.exists():
        if not overwrite:
            raise DestinationExistsError(str(target))
        logger.warning("Removing existing directory before cloning", path=str(target))
        shutil.rmtree(target)

    config = None
    if credentials is not None and url.startswith("https://"):
        config = basic_auth_config(credentials.username, credentials.token)
    try:
        GitRepository.clone(url, target, config=config, progress=progress)
    except (GitCommandError, GitExecutableNotFoundError) as exc:
        raise CloneError(f"Failed to clone repository: {exc}") from exc
    logger.info("Cloned repository", path=str(target))
    return target
