"""Contains utility functions for GitHub interactions."""

from github_repo_manager.utils.constants import DEFAULT_GITHUB_WEB_URL


async def split_repository_in_configuration(repo: str | None, default_owner: str | None = None) -> tuple[str, str]:
    """Splits a repository reference into owner and repository.

    Accepts either 'owner/repo' or a bare 'repo', in which case the default owner is used.
    """
    if repo is None:
        raise ValueError("A repository name is required.")
    repo = repo.strip().strip("/")
    parts = repo.split("/")
    if len(parts) == 1 and parts[0]:
        if not default_owner:
            raise ValueError(f"Repository '{repo}' has no owner and no default owner is configured.")
        return default_owner, parts[0]
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' or 'repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def web_url_from_api_url(github_api_url: str) -> str:
    """Derive the web base URL of a GitHub instance from its API URL.

    e.g., "https://api.github.com" -> "https://github.com"
    or "https://github.example.com/api/v3" -> "https://github.example.com"
    """
    if "api.github.com" in github_api_url:
        return DEFAULT_GITHUB_WEB_URL
    return github_api_url.rstrip("/").replace("/api/v3", "").replace("/api", "")


def build_clone_url(web_url: str, owner: str, name: str) -> str:
    """Build the HTTPS clone URL of a repository."""
    return f"{web_url.rstrip('/')}/{owner}/{name}.git"


def looks_like_url(reference: str) -> bool:
    """Return True if a repository reference is a URL or a local path rather than 'owner/repo'."""
    return "://" in reference or reference.startswith(("git@", "/", "./", "../", "~"))


def repository_name_from_url(url: str) -> str:
    """Extract the repository name from a clone URL (basename without the .git suffix)."""
    name = url.rstrip("/").rsplit("/", 1)[-1]
    name = name.rsplit(":", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not name:
        raise ValueError(f"Could not determine a repository name from '{url}'.")
    return name
