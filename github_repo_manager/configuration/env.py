"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from github_repo_manager.utils.constants import DEFAULT_BRANCH, DEFAULT_CREDENTIALS_FILE, DEFAULT_GITHUB_API_URL


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False
    LOG_FILE: Path | None = None

    # GitHub API settings
    GITHUB_API_URL: str = DEFAULT_GITHUB_API_URL

    # GitHub PAT settings
    GITHUB_USERNAME: str | None = None
    GITHUB_PAT_TOKEN: str | None = None

    # Credential store settings
    GITHUB_CREDENTIALS_FILE: Path = Path(DEFAULT_CREDENTIALS_FILE)

    # Git settings
    DEFAULT_BRANCH: str = DEFAULT_BRANCH


settings = Settings()
