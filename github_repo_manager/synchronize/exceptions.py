"""Custom exceptions raised by the repository synchronization workflow."""

from github_repo_manager.utils.constants import (
    EXIT_API_ERROR,
    EXIT_AUTH_ERROR,
    EXIT_FAILURE,
    EXIT_NOT_A_REPOSITORY,
    EXIT_PUSH_ERROR,
    EXIT_UNSUPPORTED_LICENSE,
)


class SyncError(Exception):
    """Base class for failures of a synchronization step."""

    exit_code: int = EXIT_FAILURE
    fatal: bool = True


class AuthError(SyncError):
    """Raised when the hosting API rejects the credentials (HTTP 401).

    Callers must invalidate any stored credentials.
    """

    exit_code = EXIT_AUTH_ERROR


class ApiError(SyncError):
    """Raised for any other non-success response from the hosting API."""

    exit_code = EXIT_API_ERROR

    def __init__(self, message: str, status_code: int | None = None, provider_message: str | None = None) -> None:
        """Initializes the exception with the HTTP status and the provider's message, when available."""
        super().__init__(message)
        self.status_code = status_code
        self.provider_message = provider_message


class ConflictError(ApiError):
    """Raised when a repository with the requested name already exists but creation was requested."""

    pass


class RepositoryNotFoundError(ApiError):
    """Raised when a repository that must already exist is absent."""

    pass


class NotARepositoryError(SyncError):
    """Raised when a working directory has no version-control metadata."""

    exit_code = EXIT_NOT_A_REPOSITORY

    def __init__(self, working_dir: str) -> None:
        """Initializes the exception with the offending directory."""
        super().__init__(f"Not a git repository: {working_dir}. Please initialize it first.")
        self.working_dir = working_dir


class PushError(SyncError):
    """Raised when pushing to the remote exits non-zero. Never retried."""

    exit_code = EXIT_PUSH_ERROR


class UnsupportedLicenseError(SyncError):
    """Raised for a licence choice without a known text. Non-fatal."""

    exit_code = EXIT_UNSUPPORTED_LICENSE
    fatal = False

    def __init__(self, choice: str) -> None:
        """Initializes the exception with the rejected choice."""
        super().__init__(f"Unsupported license choice: {choice!r}")
        self.choice = choice


class InvalidStateTransitionError(SyncError):
    """Raised when a workflow attempts a transition its state machine does not allow."""

    pass


class GitOperationError(SyncError):
    """Raised when a git command other than push fails during a workflow step."""

    pass


class WorkingDirectoryError(SyncError):
    """Raised when a file in the working directory cannot be read or written."""

    pass
