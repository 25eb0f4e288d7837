"""Contains exceptions raised when reconciling application configuration."""

from github_repo_manager.utils.constants import EXIT_AUTH_ERROR


class CredentialsUndefinedError(Exception):
    """Raised when no complete username/token pair can be found."""

    exit_code = EXIT_AUTH_ERROR

