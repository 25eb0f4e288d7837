"""Fixtures for unit tests."""

import subprocess
from pathlib import Path
from typing import Any, Callable, Generator, Literal

import pytest
import structlog

from github_repo_manager.github.abc import HostingClientBase
from github_repo_manager.synchronize.exceptions import AuthError, RepositoryNotFoundError
from github_repo_manager.synchronize.models import Credentials

GitRunner = Callable[..., str]


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def git_identity(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give git a committer identity regardless of the machine's global configuration."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")


def _run_git(*args: str, cwd: Path | None = None) -> str:
    result = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True, check=True)
    return result.stdout.strip()


@pytest.fixture
def run_git() -> GitRunner:
    """Run a git command and return its stripped stdout."""
    return _run_git


class FakeHostingClient(HostingClientBase):
    """In-memory hosting client whose repositories are local bare git repositories."""

    def __init__(self, username: str, remotes_root: Path) -> None:
        """Initialize the fake for a user, storing bare repositories under remotes_root."""
        self.username = username
        self.remotes_root = remotes_root
        self.repositories: dict[str, dict[str, Any]] = {}
        self.issues: dict[str, list[dict[str, Any]]] = {}
        self.created: list[str] = []
        self.reject_credentials = False

    def _check_credentials(self) -> None:
        if self.reject_credentials:
            raise AuthError("Authentication failed: Bad credentials")

    def add_repository(self, owner: str, name: str, **extra: Any) -> dict[str, Any]:
        """Register an existing repository backed by a fresh bare git repository."""
        bare_path = self.remotes_root / owner / f"{name}.git"
        bare_path.parent.mkdir(parents=True, exist_ok=True)
        _run_git("init", "--bare", "--quiet", str(bare_path))
        data = {
            "name": name,
            "full_name": f"{owner}/{name}",
            "html_url": f"https://github.com/{owner}/{name}",
            "clone_url": str(bare_path),
            **extra,
        }
        self.repositories[f"{owner}/{name}"] = data
        return data

    def bare_path(self, owner: str, name: str) -> Path:
        """Return the bare repository backing a remote."""
        return Path(self.repositories[f"{owner}/{name}"]["clone_url"])

    async def get_authenticated_user(self) -> dict[str, Any]:
        """Return the configured user."""
        self._check_credentials()
        return {"login": self.username}

    async def get_repository(self, owner: str, name: str) -> dict[str, Any]:
        """Return a registered repository or raise RepositoryNotFoundError."""
        self._check_credentials()
        try:
            return self.repositories[f"{owner}/{name}"]
        except KeyError:
            raise RepositoryNotFoundError("Repository not found: Not Found", 404, "Not Found") from None

    async def create_repository(self, name: str, description: str = "", private: bool = False) -> dict[str, Any]:
        """Create a repository for the authenticated user."""
        self._check_credentials()
        data = self.add_repository(self.username, name, description=description, private=private)
        self.created.append(f"{self.username}/{name}")
        return data

    async def list_issues(self, owner: str, name: str, state: Literal["open", "closed", "all"] = "all") -> list[dict[str, Any]]:
        """Return the registered issues of a repository."""
        await self.get_repository(owner, name)
        issues = self.issues.get(f"{owner}/{name}", [])
        if state == "all":
            return issues
        return [issue for issue in issues if issue["state"] == state]


@pytest.fixture
def credentials() -> Credentials:
    """Credentials for the test user."""
    return Credentials(username="alice", access_token="ghp_testtoken123")


@pytest.fixture
def fake_client(tmp_path: Path) -> FakeHostingClient:
    """A fake hosting client for the test user."""
    remotes_root = tmp_path / "remotes"
    remotes_root.mkdir()
    return FakeHostingClient("alice", remotes_root)


@pytest.fixture
def working_dir(tmp_path: Path) -> Path:
    """An empty working directory named 'demo'."""
    path = tmp_path / "demo"
    path.mkdir()
    return path


@pytest.fixture
def local_repository(tmp_path: Path, run_git: GitRunner) -> Path:
    """A git repository on branch main with a single committed file."""
    path = tmp_path / "project"
    path.mkdir()
    run_git("init", "--quiet", cwd=path)
    run_git("symbolic-ref", "HEAD", "refs/heads/main", cwd=path)
    (path / "app.py").write_text("print('hello')\n")
    run_git("add", "--all", cwd=path)
    run_git("commit", "--quiet", "-m", "First commit", cwd=path)
    return path
