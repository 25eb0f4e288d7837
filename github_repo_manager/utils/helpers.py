"""General utility functions and helper classes."""

import datetime
import re
from pathlib import Path
from typing import Iterable

from github_repo_manager.utils.constants import UPDATE_COMMIT_MESSAGE_TEMPLATE, URL_CREDENTIALS_PATTERN

REDACTED = "***"


def redact_url_credentials(text: str) -> str:
    """Replace any user:password section of URLs in text with a placeholder."""
    return URL_CREDENTIALS_PATTERN.sub(lambda match: f"{match.group('scheme')}{REDACTED}@", text)


def redact_secrets(text: str, secrets: Iterable[str | None]) -> str:
    """Remove every occurrence of the given secrets (and URL credentials) from text."""
    redacted = redact_url_credentials(text)
    for secret in secrets:
        if secret:
            redacted = redacted.replace(secret, REDACTED)
    return redacted


def slugify_repository_name(name: str) -> str:
    """Normalize a folder name into something GitHub accepts as a repository name.

    GitHub replaces any run of characters outside [A-Za-z0-9._-] with a single hyphen.
    """
    slug = re.sub(r"[^A-Za-z0-9._-]+", "-", name.strip())
    return slug.strip("-")


def derive_repository_name(directory: Path) -> str:
    """Derive a default repository name from a working directory."""
    return slugify_repository_name(directory.resolve().name)


def generate_update_commit_message(now: datetime.datetime | None = None) -> str:
    """Generate the timestamped commit message used by the update workflow."""
    if now is None:
        now = datetime.datetime.now()
    return UPDATE_COMMIT_MESSAGE_TEMPLATE.format(timestamp=now.strftime("%Y-%m-%d %H:%M:%S"))
