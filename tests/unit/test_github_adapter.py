"""Unit tests for the GitHubKitAdapter class and its error translation."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from githubkit.exception import RequestFailed

from github_repo_manager.github.adapter import GitHubKitAdapter, extract_provider_message
from github_repo_manager.synchronize.exceptions import ApiError, AuthError, ConflictError, RepositoryNotFoundError


class DummyResponse:
    """A dummy response object to mock GitHub API responses."""

    def __init__(self, status_code: int = 200, body: Any = None) -> None:
        """Initialize the dummy response with a status code and JSON body."""
        self.status_code: int = status_code
        self._body = body

    def json(self) -> Any:
        """Return the JSON body."""
        return self._body


def request_failed(status_code: int, body: Any = None) -> RequestFailed:
    """Build a RequestFailed carrying a response with the given status and body."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body or {}
    return RequestFailed(response)


@pytest.fixture
def adapter() -> GitHubKitAdapter:
    """An adapter around a mocked githubkit client."""
    return GitHubKitAdapter(MagicMock())


@pytest.mark.asyncio
async def test_get_repository_success(adapter: GitHubKitAdapter) -> None:
    """Test that get_repository returns the raw repository body."""
    adapter.client.rest.repos.async_get = AsyncMock(return_value=DummyResponse(body={"full_name": "alice/demo"}))
    assert await adapter.get_repository("alice", "demo") == {"full_name": "alice/demo"}
    adapter.client.rest.repos.async_get.assert_awaited_once_with(owner="alice", repo="demo")


@pytest.mark.asyncio
async def test_get_repository_not_found(adapter: GitHubKitAdapter) -> None:
    """Test that a 404 on a repository lookup raises RepositoryNotFoundError."""
    adapter.client.rest.repos.async_get = AsyncMock(side_effect=request_failed(404, {"message": "Not Found"}))
    with pytest.raises(RepositoryNotFoundError) as exc_info:
        await adapter.get_repository("alice", "missing")
    assert exc_info.value.status_code == 404
    assert exc_info.value.provider_message == "Not Found"


@pytest.mark.asyncio
async def test_unauthorized_raises_auth_error(adapter: GitHubKitAdapter) -> None:
    """Test that a 401 raises AuthError."""
    adapter.client.rest.users.async_get_authenticated = AsyncMock(side_effect=request_failed(401, {"message": "Bad credentials"}))
    with pytest.raises(AuthError, match="Bad credentials"):
        await adapter.get_authenticated_user()


@pytest.mark.asyncio
async def test_create_repository_success(adapter: GitHubKitAdapter) -> None:
    """Test that creation sends the visibility and returns the body."""
    body = {"html_url": "https://github.com/alice/demo", "clone_url": "https://github.com/alice/demo.git"}
    adapter.client.rest.repos.async_create_for_authenticated_user = AsyncMock(return_value=DummyResponse(201, body))

    assert await adapter.create_repository("demo", description="A demo", private=True) == body
    adapter.client.rest.repos.async_create_for_authenticated_user.assert_awaited_once_with(
        name="demo", description="A demo", private=True, auto_init=False
    )


@pytest.mark.asyncio
async def test_create_repository_without_html_url(adapter: GitHubKitAdapter) -> None:
    """Test that a 201 without html_url is treated as an unexpected response."""
    adapter.client.rest.repos.async_create_for_authenticated_user = AsyncMock(return_value=DummyResponse(201, {"name": "demo"}))
    with pytest.raises(ApiError, match="html_url"):
        await adapter.create_repository("demo")


@pytest.mark.asyncio
async def test_create_repository_name_taken(adapter: GitHubKitAdapter) -> None:
    """Test that a 422 'already exists' response raises ConflictError with the provider message."""
    body = {"message": "Repository creation failed.", "errors": [{"message": "name already exists on this account"}]}
    adapter.client.rest.repos.async_create_for_authenticated_user = AsyncMock(side_effect=request_failed(422, body))
    with pytest.raises(ConflictError) as exc_info:
        await adapter.create_repository("demo")
    assert exc_info.value.provider_message == "name already exists on this account"
    assert exc_info.value.exit_code == 3


@pytest.mark.asyncio
async def test_create_repository_other_failure(adapter: GitHubKitAdapter) -> None:
    """Test that any other failure raises a plain ApiError carrying the status."""
    adapter.client.rest.repos.async_create_for_authenticated_user = AsyncMock(side_effect=request_failed(500, {"message": "Server Error"}))
    with pytest.raises(ApiError) as exc_info:
        await adapter.create_repository("demo")
    assert type(exc_info.value) is ApiError
    assert exc_info.value.status_code == 500
    assert "HTTP 500" in str(exc_info.value)


@pytest.mark.asyncio
async def test_list_issues_paginates(adapter: GitHubKitAdapter) -> None:
    """Test that list_issues follows pages until a short page is returned."""
    first_page = [{"number": i} for i in range(2)]
    second_page = [{"number": 2}]
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(side_effect=[DummyResponse(body=first_page), DummyResponse(body=second_page)])

    issues = await adapter.list_issues("alice", "demo", per_page=2)

    assert [issue["number"] for issue in issues] == [0, 1, 2]
    assert adapter.client.rest.issues.async_list_for_repo.await_count == 2


def test_extract_provider_message_prefers_errors() -> None:
    """Test that the first entry of errors wins over the top-level message."""
    response = DummyResponse(body={"message": "Validation Failed", "errors": [{"message": "name already exists"}]})
    assert extract_provider_message(response) == "name already exists"


def test_extract_provider_message_falls_back_to_message() -> None:
    """Test the fallback to the top-level message."""
    assert extract_provider_message(DummyResponse(body={"message": "Not Found"})) == "Not Found"
    assert extract_provider_message(DummyResponse(body=[])) is None
