"""Pydantic models and enums for the repository synchronization workflow."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, SecretStr


class Visibility(str, Enum):
    """Enum for repository visibility."""

    PUBLIC = "public"
    PRIVATE = "private"


class LicenseChoice(str, Enum):
    """Enum for the licence texts that can be materialized."""

    NONE = "none"
    MIT = "MIT"
    APACHE_2_0 = "Apache-2.0"
    GPL_3_0 = "GPL-3.0"


class SyncState(str, Enum):
    """States a single synchronization invocation moves through."""

    IDLE = "idle"
    REMOTE_CHECKED = "remote_checked"
    REMOTE_CREATED = "remote_created"
    REMOTE_CONFIRMED = "remote_confirmed"
    COMMITTED = "committed"
    LINKED = "linked"
    PUSHED = "pushed"
    FAILED = "failed"


class Credentials(BaseModel):
    """Username and personal access token for the hosting API and git transport."""

    model_config = ConfigDict(frozen=True)

    username: str
    access_token: SecretStr

    @property
    def token(self) -> str:
        """Return the raw token. Never log the result."""
        return self.access_token.get_secret_value()


class RepositoryTarget(BaseModel):
    """Identity and creation settings of the remote repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str
    description: str = ""
    visibility: Visibility = Visibility.PUBLIC
    # Kept as a plain string so unknown choices surface as a non-fatal
    # UnsupportedLicenseError instead of a validation failure.
    license_choice: str = LicenseChoice.NONE.value

    @property
    def full_name(self) -> str:
        """Return the 'owner/name' form of the repository."""
        return f"{self.owner}/{self.name}"

    @property
    def private(self) -> bool:
        """Return True if the repository should be private."""
        return self.visibility == Visibility.PRIVATE


class RemoteStatus(BaseModel):
    """Outcome of checking for (and possibly creating) the remote repository."""

    existed: bool
    url: str
    clone_url: str


class CommitOutcome(BaseModel):
    """Outcome of staging and committing the working tree."""

    committed: bool
    sha: str | None = None
