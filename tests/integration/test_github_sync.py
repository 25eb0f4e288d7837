"""Integration tests that create, update and inspect a real GitHub repository."""

import asyncio
import subprocess
from pathlib import Path

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy

from .utils import generate_unique_repository_name, run_cli


async def _delete_repository(token: str, owner: str, name: str) -> None:
    """Delete a repository created by a test (requires the delete_repo scope)."""
    github = GitHub(auth=TokenAuthStrategy(token))
    try:
        await github.rest.repos.async_delete(owner=owner, repo=name)
    except Exception as exc:  # noqa: BLE001
        print(f"Could not delete {owner}/{name}: {exc}")


def test_create_update_and_inspect(tmp_path: Path, live_github: dict[str, str]) -> None:
    """Test the full life cycle: create with a licence, update with one more commit, then read it back."""
    username = live_github["GITHUB_USERNAME"]
    token = live_github["GITHUB_PAT_TOKEN"]
    credentials_file = tmp_path / "config"
    env = {"GITHUB_USERNAME": username, "GITHUB_PAT_TOKEN": token}
    name = generate_unique_repository_name()
    working_dir = tmp_path / name
    working_dir.mkdir()
    (working_dir / "main.py").write_text("print('hello')\n")

    try:
        result = run_cli(["create", str(working_dir), "--license", "MIT", "--visibility", "private"], credentials_file, env)
        assert result.returncode == 0
        assert "Created new repository: True" in result.stdout
        assert token not in result.stdout + result.stderr
        assert token not in (working_dir / ".git" / "config").read_text()

        (working_dir / "main.py").write_text("print('updated')\n")
        result = run_cli(["update", str(working_dir)], credentials_file, env)
        assert result.returncode == 0
        assert "Commit made: True" in result.stdout
        commit_count = subprocess.run(["git", "rev-list", "--count", "HEAD"], cwd=working_dir, capture_output=True, text=True, check=True)
        assert commit_count.stdout.strip() == "2"

        result = run_cli(["info", "--name", name], credentials_file, env)
        assert result.returncode == 0
        assert f"Repository Information: {username}/{name}" in result.stdout
        assert "Visibility: private" in result.stdout

        result = run_cli(["create", str(working_dir)], credentials_file, env)
        assert result.returncode == 3
    finally:
        asyncio.run(_delete_repository(token, username, name))
