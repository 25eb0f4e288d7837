"""Shared constants used across the application."""

# This file is intended to hold shared constants.

import re

# GitHub Settings
# ---------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"
"""Default GitHub REST API URL."""

DEFAULT_GITHUB_WEB_URL = "https://github.com"
"""Default GitHub web URL, used when building clone URLs without an API response."""

# Git Settings
# ------------

DEFAULT_BRANCH = "main"
"""Branch that is checked out and pushed by the synchronization workflows."""

REMOTE_NAME = "origin"
"""Canonical name of the remote link configured in the working directory."""

GIT_METADATA_DIRECTORY = ".git"
"""Name of the version-control metadata directory."""

INITIAL_COMMIT_MESSAGE = "Initial commit"
"""Commit message used by the create workflow."""

UPDATE_COMMIT_MESSAGE_TEMPLATE = "Auto-update {timestamp}"
"""Commit message template used by the update workflow."""

README_FILE_NAME = "README.md"
LICENSE_FILE_NAME = "LICENSE"

# Credential Store Settings
# -------------------------

DEFAULT_CREDENTIALS_FILE = "~/.config/github_uploader/config"
"""Default location of the credential file."""

CREDENTIALS_USERNAME_KEY = "GITHUB_USER"
CREDENTIALS_TOKEN_KEY = "GITHUB_TOKEN"

# Regex Patterns
# --------------

URL_CREDENTIALS_PATTERN = re.compile(r"(?P<scheme>https?://)[^/@\s]+@")
"""Pattern to match user:password credentials embedded in URLs."""

CLONE_PROGRESS_PATTERN = re.compile(r"(\d{1,3})%")
"""Pattern to match percentage progress lines emitted by `git clone --progress`."""

# Exit Codes
# ----------

EXIT_FAILURE = 1
EXIT_AUTH_ERROR = 2
EXIT_API_ERROR = 3
EXIT_PUSH_ERROR = 4
EXIT_UNSUPPORTED_LICENSE = 5
EXIT_NOT_A_REPOSITORY = 6
