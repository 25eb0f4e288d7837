# This file is intended to hold the setup for the authenticated githubkit client.

"""Sets up the authenticated githubkit client."""

from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy

from github_repo_manager.synchronize.models import Credentials

GitHubClient: TypeAlias = GitHub[TokenAuthStrategy]


async def get_github_pat_client(credentials: Credentials, github_api_url: str, timeout: float | None = None) -> GitHubClient:
    """Returns an authenticated GitHub client using GitHub PAT credentials.

    Supports custom base URL for GitHub Enterprise Server (GHES).
    Request timeouts are left to the underlying HTTP client unless given.
    """
    if not credentials.token:
        raise RuntimeError("GitHub PAT authentication requires an access token.")
    # Disable HTTP caching to always get fresh data
    return GitHub(auth=TokenAuthStrategy(credentials.token), base_url=github_api_url, http_cache=False, timeout=timeout)
