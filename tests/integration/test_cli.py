"""Integration tests for the CLI that need no GitHub access."""

from pathlib import Path

from .utils import run_cli


def test_token_help(tmp_path: Path) -> None:
    """Test that token-help prints the instructions and exits cleanly."""
    result = run_cli(["token-help"], tmp_path / "config")
    assert result.returncode == 0
    assert "Personal access tokens" in result.stdout


def test_missing_credentials(tmp_path: Path) -> None:
    """Test that the CLI exits with code 2 if no credentials are available."""
    result = run_cli(["info", "--name", "alice/demo"], tmp_path / "config")
    assert result.returncode == 2
    assert "No GitHub credentials provided" in result.stderr


def test_unsupported_license(tmp_path: Path) -> None:
    """Test that the CLI exits with code 5 for an unsupported licence."""
    result = run_cli(["license", "WTFPL", "--owner", "alice"], tmp_path / "config")
    assert result.returncode == 5
    assert "Unsupported license choice" in result.stderr


def test_update_outside_repository_without_credentials(tmp_path: Path) -> None:
    """Test that the credential check happens before any network access."""
    working_dir = tmp_path / "plain"
    working_dir.mkdir()
    result = run_cli(["update", str(working_dir)], tmp_path / "config")
    assert result.returncode == 2
    assert not (working_dir / ".git").exists()
