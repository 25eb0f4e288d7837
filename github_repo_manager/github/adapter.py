"""GitHub client adapter for the githubkit library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Literal, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import GitHubException, RequestFailed

from github_repo_manager.synchronize.exceptions import ApiError, AuthError, ConflictError, RepositoryNotFoundError
from github_repo_manager.synchronize.models import Credentials
from github_repo_manager.utils.constants import DEFAULT_GITHUB_API_URL

from .abc import HostingClientBase
from .client import GitHubClient, get_github_pat_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def extract_provider_message(response: Any) -> str | None:
    """Extract the most specific error message from a GitHub error response body.

    Prefers the first entry of `errors`, falling back to the top-level `message`.
    """
    try:
        error_data = response.json()
    except ValueError:
        return None
    if not isinstance(error_data, dict):
        return None
    errors = error_data.get("errors")
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict) and first.get("message"):
            return str(first["message"])
        if isinstance(first, str):
            return first
    message = error_data.get("message")
    return str(message) if message else None


def handle_github_errors(missing_repository_on_404: bool = False) -> Callable[[F], F]:
    """Decorator that translates githubkit failures into the typed synchronization errors.

    Nothing is retried: transient failures surface to the caller as they happened.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except RequestFailed as exc:
                status_code = exc.response.status_code
                provider_message = extract_provider_message(exc.response)
                logger.error(
                    "GitHub request failed",
                    function=func.__name__,
                    status_code=status_code,
                    message=provider_message,
                    url=str(getattr(exc.response, "url", None)),
                )
                detail = f": {provider_message}" if provider_message else ""
                if status_code == 401:
                    raise AuthError(
                        f"Authentication failed{detail}. Check your username and token, and make sure the token has the 'repo' scope."
                    ) from exc
                if status_code == 404 and missing_repository_on_404:
                    raise RepositoryNotFoundError(f"Repository not found{detail}", status_code, provider_message) from exc
                if status_code == 422 and provider_message and "already exists" in provider_message.lower():
                    raise ConflictError(f"GitHub API error: {provider_message}", status_code, provider_message) from exc
                raise ApiError(f"GitHub API error (HTTP {status_code}){detail}", status_code, provider_message) from exc
            except GitHubException as exc:
                logger.error("GitHub request could not be completed", function=func.__name__, error=str(exc))
                raise ApiError(f"GitHub request could not be completed: {exc}") from exc

        return wrapper  # type: ignore

    return decorator


class GitHubKitAdapter(HostingClientBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client

    @classmethod
    async def create(
        cls,
        credentials: Credentials,
        github_api_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float | None = None,
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            credentials: Username and personal access token
            github_api_url: GitHub API URL (defaults to https://api.github.com)
            timeout: Optional request timeout in seconds

        Returns:
            Configured GitHubKitAdapter instance
        """
        logger.info("Creating client for GitHub instance", github_api_url=github_api_url, username=credentials.username)
        client = await get_github_pat_client(credentials, github_api_url, timeout=timeout)
        return cls(client)

    # User
    @handle_github_errors()
    async def get_authenticated_user(self) -> dict[str, Any]:
        """Get the user the credentials belong to (GET /user)."""
        response: Response[Any] = await self.client.rest.users.async_get_authenticated()
        return response.json()

    # Repository CRUD
    @handle_github_errors(missing_repository_on_404=True)
    async def get_repository(self, owner: str, name: str) -> dict[str, Any]:
        """Get a repository (GET /repos/{owner}/{name})."""
        response: Response[Any] = await self.client.rest.repos.async_get(owner=owner, repo=name)
        return response.json()

    @handle_github_errors()
    async def create_repository(self, name: str, description: str = "", private: bool = False) -> dict[str, Any]:
        """Create a repository for the authenticated user (POST /user/repos).

        GitHub must answer 201 with an `html_url`; anything else is an unexpected response.
        """
        logger.info("Creating repository", name=name, private=private)
        response: Response[Any] = await self.client.rest.repos.async_create_for_authenticated_user(
            name=name,
            description=description,
            private=private,
            auto_init=False,
        )
        if response.status_code != 201:
            raise ApiError(f"Repository creation failed: unexpected HTTP {response.status_code}", response.status_code)
        body = response.json()
        if not isinstance(body, dict) or not body.get("html_url"):
            logger.error("Repository creation returned an unexpected response", status_code=response.status_code)
            raise ApiError("Repository creation failed: unexpected API response (no html_url)", response.status_code)
        return body

    # Issues
    @handle_github_errors(missing_repository_on_404=True)
    async def list_issues(
        self, owner: str, name: str, state: Literal["open", "closed", "all"] = "all", per_page: int = 100
    ) -> list[dict[str, Any]]:
        """List all issues for a repository, handling pagination."""
        all_issues: list[dict[str, Any]] = []
        page: int = 1
        while True:
            response: Response[Any] = await self.client.rest.issues.async_list_for_repo(
                owner=owner,
                repo=name,
                state=state,
                per_page=per_page,
                page=page,
            )
            issues: list[dict[str, Any]] = response.json()
            if not issues:
                break
            all_issues.extend(issues)
            if len(issues) < per_page:
                break
            page += 1
        return all_issues
