"""Reconcile GitHub credentials between CLI arguments, environment variables and the credential store."""

import structlog

from github_repo_manager.configuration.exceptions import CredentialsUndefinedError
from github_repo_manager.credentials.store import CredentialStore
from github_repo_manager.github.abc import HostingClientBase
from github_repo_manager.synchronize.models import Credentials

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def reconcile_credentials(
    cli_username: str | None,
    cli_token: str | None,
    store: CredentialStore | None = None,
) -> Credentials:
    """Resolves the credentials to use for this invocation.

    Args:
        cli_username (str | None): Username from the command line or GITHUB_USERNAME.
        cli_token (str | None): Token from the command line or GITHUB_PAT_TOKEN.
        store (CredentialStore | None): Credential store consulted when neither value is given.

    Raises:
        CredentialsUndefinedError: If only one of username/token is given, or nothing is found.

    Returns:
        Credentials: The resolved credentials.
    """
    if cli_username and cli_token:
        return Credentials(username=cli_username, access_token=cli_token)

    if cli_username or cli_token:
        missing_settings: list[dict[str, str]] = []
        if not cli_username:
            missing_settings.append({"name": "GitHub username", "cli_name": "--github-username", "env_name": "GITHUB_USERNAME"})
        if not cli_token:
            missing_settings.append({"name": "GitHub personal access token", "cli_name": "--github-pat-token", "env_name": "GITHUB_PAT_TOKEN"})
        msg = "Incomplete GitHub credentials - missing settings include " + ", ".join(
            f"{setting['name']} (command line option {setting['cli_name']}, environment variable {setting['env_name']})"
            for setting in missing_settings
        )
        raise CredentialsUndefinedError(msg)

    if store is not None:
        stored = store.load()
        if stored is not None:
            logger.info("Using stored credentials", path=str(store.path), username=stored.username)
            return stored

    raise CredentialsUndefinedError(
        "No GitHub credentials provided. Run 'login', or provide GITHUB_USERNAME and GITHUB_PAT_TOKEN."
    )


async def validate_credentials(client: HostingClientBase, credentials: Credentials) -> str:
    """Validates credentials against the hosting API (GET /user) and returns the authenticated login.

    Raises:
        AuthError: If the API rejects the credentials.
    """
    user = await client.get_authenticated_user()
    login = str(user.get("login") or credentials.username)
    if login.lower() != credentials.username.lower():
        logger.warning("Token belongs to a different user than the configured username", username=credentials.username, login=login)
    logger.info("Validated GitHub credentials", login=login)
    return login
