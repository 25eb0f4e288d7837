"""Utility functions for integration tests."""

import os
import subprocess
import sys
import uuid
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.parent


def get_cli_with_starting_args(credentials_file: Path) -> list[str]:
    """Get the command that runs the CLI with an isolated credential file."""
    return [sys.executable, "-m", "github_repo_manager.configuration.cli", "--credentials-file", str(credentials_file)]


def run_cli(args: list[str], credentials_file: Path, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    """Helper to run the CLI as a subprocess and capture output.

    Args:
        args: List of command line arguments to pass to the CLI.
        credentials_file: Credential file used instead of the user's own.
        env: Extra environment variables for the CLI process.

    Returns:
        subprocess.CompletedProcess: The result of running the CLI command.
    """
    complete_command = get_cli_with_starting_args(credentials_file) + args
    print(f"Running command: {' '.join(complete_command)}")
    process_env = {key: value for key, value in os.environ.items() if key not in ("GITHUB_USERNAME", "GITHUB_PAT_TOKEN")}
    process_env.update(env or {})
    result = subprocess.run(complete_command, capture_output=True, text=True, cwd=PROJECT_ROOT, env=process_env)
    print(f"Command result: {result.returncode}")
    print(f"Command stdout: {result.stdout}")
    print(f"Command stderr: {result.stderr}")
    return result


def generate_unique_repository_name(prefix: str = "github-repo-manager-it") -> str:
    """Generate a repository name that does not collide with earlier test runs."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"
