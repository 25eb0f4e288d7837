"""Persists credentials in a user-only key/value file."""

import os
from pathlib import Path

import structlog
from dotenv import dotenv_values

from github_repo_manager.synchronize.models import Credentials
from github_repo_manager.utils.constants import CREDENTIALS_TOKEN_KEY, CREDENTIALS_USERNAME_KEY

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

CREDENTIALS_FILE_MODE = 0o600


class CredentialStore:
    """A credential file holding two quoted KEY="value" lines (username and token)."""

    def __init__(self, path: Path) -> None:
        """Initialize the store for a file path (a leading ~ is expanded)."""
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        """Return True if the credential file exists."""
        return self.path.is_file()

    def load(self) -> Credentials | None:
        """Load credentials, or None when the file is missing or incomplete."""
        if not self.exists():
            return None
        values = dotenv_values(self.path)
        username = values.get(CREDENTIALS_USERNAME_KEY)
        token = values.get(CREDENTIALS_TOKEN_KEY)
        if not username or not token:
            logger.warning("Credential file is incomplete", path=str(self.path))
            return None
        return Credentials(username=username, access_token=token)

    def save(self, credentials: Credentials) -> None:
        """Write credentials, restricting the file to the owning user."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = f'{CREDENTIALS_USERNAME_KEY}="{credentials.username}"\n{CREDENTIALS_TOKEN_KEY}="{credentials.token}"\n'
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CREDENTIALS_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        # An existing file keeps its old mode through os.open.
        os.chmod(self.path, CREDENTIALS_FILE_MODE)
        logger.info("Saved credentials", path=str(self.path), username=credentials.username)

    def delete(self) -> bool:
        """Delete the credential file. Returns False if there was nothing to delete."""
        if not self.exists():
            return False
        self.path.unlink()
        logger.info("Deleted credentials", path=str(self.path))
        return True
