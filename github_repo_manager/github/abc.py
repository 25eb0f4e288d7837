"""Base ABC for repository hosting clients."""

from abc import ABC, abstractmethod
from typing import Any, Literal


class HostingClientBase(ABC):
    """Base ABC for repository hosting clients.

    Implementations raise the typed errors from `github_repo_manager.synchronize.exceptions`
    instead of transport-specific exceptions.
    """

    # User
    @abstractmethod
    async def get_authenticated_user(self) -> dict[str, Any]:
        """Get the user the credentials belong to."""
        pass

    # Repository CRUD
    @abstractmethod
    async def get_repository(self, owner: str, name: str) -> dict[str, Any]:
        """Get a repository. Raises RepositoryNotFoundError if it does not exist."""
        pass

    @abstractmethod
    async def create_repository(self, name: str, description: str = "", private: bool = False) -> dict[str, Any]:
        """Create a repository for the authenticated user without initializing its content."""
        pass

    # Issues
    @abstractmethod
    async def list_issues(self, owner: str, name: str, state: Literal["open", "closed", "all"] = "all") -> list[dict[str, Any]]:
        """List issues for a repository."""
        pass
