"""Thin wrapper around the git command line client."""

import base64
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable

import structlog

from github_repo_manager.git.exceptions import GitCommandError, GitExecutableNotFoundError
from github_repo_manager.utils.constants import GIT_METADATA_DIRECTORY
from github_repo_manager.utils.helpers import redact_secrets

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

ProgressObserver = Callable[[str], None]


def basic_auth_config(username: str, token: str) -> dict[str, str]:
    """Build one-shot git config that authenticates HTTPS transport with basic auth.

    Passed with `git -c`, so the token never lands in .git/config.
    """
    encoded = base64.b64encode(f"{username}:{token}".encode()).decode()
    return {"http.extraHeader": f"Authorization: Basic {encoded}"}


def _git_executable() -> str:
    executable = shutil.which("git")
    if executable is None:
        raise GitExecutableNotFoundError("git executable not found on PATH. Install git and try again.")
    return executable


def _git_environment() -> dict[str, str]:
    env = dict(os.environ)
    # Never block waiting for an interactive credential prompt.
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def _build_command(args: list[str], config: dict[str, str] | None) -> list[str]:
    command = [_git_executable()]
    for key, value in (config or {}).items():
        command.extend(["-c", f"{key}={value}"])
    command.extend(args)
    return command


class GitRepository:
    """A local working directory driven through the git CLI."""

    def __init__(self, working_dir: Path) -> None:
        """Initialize the wrapper for a working directory."""
        self.working_dir = Path(working_dir)

    def run(
        self,
        *args: str,
        config: dict[str, str] | None = None,
        secrets: list[str] | None = None,
        check: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        """Run a git subcommand in the working directory and return the completed process.

        Config values are never logged. Output is redacted of the given secrets and any URL credentials.
        """
        command = _build_command(list(args), config)
        redaction = [*(secrets or []), *(config or {}).values()]
        logged_args = [redact_secrets(arg, redaction) for arg in args]
        logger.debug("Running git command", args=logged_args, config_keys=sorted(config or {}), cwd=str(self.working_dir))
        result = subprocess.run(
            command,
            cwd=self.working_dir,
            capture_output=True,
            text=True,
            env=_git_environment(),
        )
        if check and result.returncode != 0:
            stderr = redact_secrets(result.stderr or result.stdout, redaction)
            logger.error("Git command failed", args=logged_args, returncode=result.returncode, stderr=stderr.strip())
            raise GitCommandError(logged_args, result.returncode, stderr)
        return result

    def is_repository(self) -> bool:
        """Return True if the working directory has version-control metadata."""
        return (self.working_dir / GIT_METADATA_DIRECTORY).exists()

    def init(self) -> None:
        """Initialize a new repository in the working directory."""
        self.run("init", "--quiet")

    def add_all(self) -> None:
        """Stage every tracked and untracked file (the metadata directory is never staged)."""
        self.run("add", "--all", ".")

    def status_porcelain(self) -> list[str]:
        """Return the non-empty lines of `git status --porcelain`."""
        result = self.run("status", "--porcelain")
        return [line for line in result.stdout.splitlines() if line.strip()]

    def has_changes(self) -> bool:
        """Return True if the working tree or index differ from HEAD."""
        return bool(self.status_porcelain())

    def commit(self, message: str) -> str:
        """Commit the index and return the new HEAD sha."""
        self.run("commit", "--quiet", "-m", message)
        return self.head_sha()

    def head_sha(self, ref: str = "HEAD") -> str:
        """Return the sha a ref resolves to."""
        return self.run("rev-parse", ref).stdout.strip()

    def commit_count(self, ref: str = "HEAD") -> int:
        """Return the number of commits reachable from a ref, 0 for an unborn branch."""
        result = self.run("rev-list", "--count", ref, check=False)
        if result.returncode != 0:
            return 0
        return int(result.stdout.strip())

    def checkout_branch(self, branch: str) -> None:
        """Create or reset a branch to the current HEAD and switch to it."""
        self.run("checkout", "--quiet", "-B", branch)

    def list_remotes(self) -> list[str]:
        """Return the configured remote names."""
        return [line.strip() for line in self.run("remote").stdout.splitlines() if line.strip()]

    def get_remote_url(self, name: str) -> str | None:
        """Return the URL of a remote, or None if it is not configured."""
        result = self.run("remote", "get-url", name, check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def remove_remote(self, name: str) -> None:
        """Remove a remote link."""
        self.run("remote", "remove", name)

    def add_remote(self, name: str, url: str) -> None:
        """Add a remote link."""
        self.run("remote", "add", name, url)

    def push(
        self,
        remote: str,
        branch: str,
        force: bool = True,
        set_upstream: bool = True,
        config: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Push a local branch to a remote."""
        args = ["push"]
        if set_upstream:
            args.append("--set-upstream")
        if force:
            args.append("--force")
        args.extend([remote, branch])
        return self.run(*args, config=config)

    @classmethod
    def clone(
        cls,
        url: str,
        destination: Path,
        config: dict[str, str] | None = None,
        progress: ProgressObserver | None = None,
    ) -> "GitRepository":
        """Clone a repository, streaming stderr progress lines to an optional observer."""
        command = _build_command(["clone", "--progress", url, str(destination)], config)
        redaction = list((config or {}).values())
        logger.info("Cloning repository", url=redact_secrets(url, redaction), destination=str(destination))
        stderr_lines: list[str] = []
        # Text mode translates git's carriage-return progress updates into lines.
        with subprocess.Popen(
            command,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            env=_git_environment(),
        ) as process:
            assert process.stderr is not None
            for raw_line in process.stderr:
                line = redact_secrets(raw_line.rstrip("\n"), redaction)
                if not line:
                    continue
                stderr_lines.append(line)
                if progress is not None:
                    progress(line)
            returncode = process.wait()
        if returncode != 0:
            raise GitCommandError(["clone", redact_secrets(url, redaction), str(destination)], returncode, "\n".join(stderr_lines[-20:]))
        return cls(destination)
