"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import datetime
from pathlib import Path
from typing import Literal

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from github_repo_manager.configuration.env import settings
from github_repo_manager.configuration.exceptions import CredentialsUndefinedError
from github_repo_manager.configuration.logging import configure_logging
from github_repo_manager.configuration.reconcile import reconcile_credentials, validate_credentials
from github_repo_manager.credentials.store import CredentialStore
from github_repo_manager.github.adapter import GitHubKitAdapter
from github_repo_manager.repository.clone import clone_repository, parse_progress_percentage
from github_repo_manager.repository.exceptions import CloneError, DestinationExistsError
from github_repo_manager.repository.inspect import get_repository_info, summarize_issues
from github_repo_manager.repository.models import IssuesSummary, RepositoryInfo
from github_repo_manager.synchronize.driver import run_create_workflow, run_update_workflow
from github_repo_manager.synchronize.exceptions import AuthError, SyncError, UnsupportedLicenseError
from github_repo_manager.synchronize.licenses import materialize_license
from github_repo_manager.synchronize.models import Credentials, Visibility
from github_repo_manager.synchronize.results import SyncResult
from github_repo_manager.utils.constants import EXIT_FAILURE
from github_repo_manager.utils.github import (
    build_clone_url,
    looks_like_url,
    split_repository_in_configuration,
    web_url_from_api_url,
)
from github_repo_manager.utils.helpers import derive_repository_name

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Create, update, clone and inspect GitHub repositories.")

TOKEN_HELP = """To create a GitHub Personal Access Token:

1. Go to GitHub.com -> Settings -> Developer settings -> Personal access tokens
2. Click 'Generate new token'
3. Give it a name and select the 'repo' scope
4. Click 'Generate token'
5. Copy the token and use it with the 'login' command

Note: The token will only be shown once, so copy it immediately."""


@typer_app.callback()
def main_callback(
    ctx: typer.Context,
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = settings.GITHUB_API_URL,
    github_username: Annotated[str | None, Option(envvar="GITHUB_USERNAME", help="GitHub username.")] = None,
    github_pat_token: Annotated[str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token.")] = None,
    credentials_file: Annotated[
        Path, Option(envvar="GITHUB_CREDENTIALS_FILE", help="Path to the stored credentials file.")
    ] = settings.GITHUB_CREDENTIALS_FILE,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = settings.DEBUG,
    log_file: Annotated[Path | None, Option(envvar="LOG_FILE", help="Also write logs to this file.")] = settings.LOG_FILE,
) -> None:
    """Set the GitHub connection and credential settings for the current context."""
    configure_logging(debug=debug, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj["github_api_url"] = github_api_url
    ctx.obj["github_username"] = github_username
    ctx.obj["github_pat_token"] = github_pat_token
    ctx.obj["credential_store"] = CredentialStore(credentials_file)


def _resolve_credentials(ctx: typer.Context) -> Credentials:
    """Resolve credentials from options, environment or the credential store, exiting on failure."""
    try:
        return asyncio.run(
            reconcile_credentials(
                cli_username=ctx.obj["github_username"],
                cli_token=ctx.obj["github_pat_token"],
                store=ctx.obj["credential_store"],
            )
        )
    except CredentialsUndefinedError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(exc.exit_code) from exc


def _invalidate_stored_credentials(ctx: typer.Context, credentials: Credentials) -> None:
    """Delete stored credentials if they are the ones the hosting API just rejected."""
    store: CredentialStore = ctx.obj["credential_store"]
    stored = store.load()
    if stored is not None and stored == credentials:
        store.delete()
        typer.echo(f"Removed rejected credentials from {store.path}", err=True)


def _fail(ctx: typer.Context, exc: SyncError, credentials: Credentials | None = None) -> typer.Exit:
    """Report a typed failure and build the matching exit."""
    typer.echo(f"Error: {exc}", err=True)
    if isinstance(exc, AuthError) and credentials is not None:
        _invalidate_stored_credentials(ctx, credentials)
    return typer.Exit(exc.exit_code)


def _report_sync_result(ctx: typer.Context, result: SyncResult, credentials: Credentials, success_message: str) -> None:
    """Print a workflow result and exit with its code."""
    for failure in result.errors:
        if failure.fatal:
            typer.echo(f"Error during {failure.step}: {failure.message}", err=True)
        else:
            typer.echo(f"Warning during {failure.step}: {failure.message}", err=True)
    if any(isinstance(failure.error, AuthError) for failure in result.fatal_errors):
        _invalidate_stored_credentials(ctx, credentials)

    typer.echo(f"Remote: {result.remote_url or 'n/a'}")
    typer.echo(f"Created new repository: {result.created_new}")
    typer.echo(f"Commit made: {result.commit_made}")
    typer.echo(f"Pushed: {result.pushed}")
    if result.succeeded:
        typer.echo(success_message)
    raise typer.Exit(result.exit_code)


def _resolve_directory(directory: Path) -> Path:
    if not directory.is_dir():
        typer.echo(f"Directory does not exist: {directory}", err=True)
        raise typer.Exit(EXIT_FAILURE)
    return directory.resolve()


@typer_app.command(name="create")
def create_cli(
    ctx: typer.Context,
    directory: Annotated[Path, Argument(help="Working directory to publish.")] = Path("."),
    name: Annotated[str | None, Option("--name", "-n", help="Repository name (repo or owner/repo). Defaults to the directory name.")] = None,
    description: Annotated[str, Option(help="Repository description.")] = "",
    license_choice: Annotated[str, Option("--license", help="License to add: none, MIT, Apache-2.0 or GPL-3.0.")] = "none",
    visibility: Annotated[Visibility, Option(help="Repository visibility.")] = Visibility.PUBLIC,
    allow_existing: Annotated[bool, Option(help="Publish into the repository if it already exists instead of failing.")] = False,
    branch: Annotated[str, Option(envvar="DEFAULT_BRANCH", help="Branch to push.")] = settings.DEFAULT_BRANCH,
) -> None:
    """Create a new GitHub repository and upload the directory to it."""
    working_dir = _resolve_directory(directory)
    credentials = _resolve_credentials(ctx)
    repo = name or derive_repository_name(working_dir)
    typer.echo(f"Creating repository {repo} from {working_dir}")
    result = asyncio.run(
        run_create_workflow(
            working_dir=working_dir,
            repo=repo,
            credentials=credentials,
            description=description,
            visibility=visibility,
            license_choice=license_choice,
            github_api_url=ctx.obj["github_api_url"],
            branch=branch,
            allow_existing=allow_existing,
        )
    )
    _report_sync_result(ctx, result, credentials, "Repository created successfully! All files have been uploaded.")


@typer_app.command(name="update")
def update_cli(
    ctx: typer.Context,
    directory: Annotated[Path, Argument(help="Working directory (an existing git repository).")] = Path("."),
    name: Annotated[str | None, Option("--name", "-n", help="Repository name (repo or owner/repo). Defaults to the directory name.")] = None,
    branch: Annotated[str, Option(envvar="DEFAULT_BRANCH", help="Branch to push.")] = settings.DEFAULT_BRANCH,
) -> None:
    """Commit local changes and force-push them to an existing GitHub repository."""
    working_dir = _resolve_directory(directory)
    credentials = _resolve_credentials(ctx)
    repo = name or derive_repository_name(working_dir)
    typer.echo(f"Updating repository {repo} from {working_dir}")
    result = asyncio.run(
        run_update_workflow(
            working_dir=working_dir,
            repo=repo,
            credentials=credentials,
            github_api_url=ctx.obj["github_api_url"],
            branch=branch,
        )
    )
    _report_sync_result(ctx, result, credentials, "Repository updated successfully!")


@typer_app.command(name="clone")
def clone_cli(
    ctx: typer.Context,
    repository: Annotated[str, Argument(help="Repository URL, owner/repo, or repo (owned by the configured user).")],
    directory: Annotated[Path, Argument(help="Directory to clone into.")] = Path("."),
    overwrite: Annotated[bool, Option(help="Replace the target directory if it already exists.")] = False,
) -> None:
    """Clone a GitHub repository into a directory."""
    credentials: Credentials | None = None
    if looks_like_url(repository):
        url = repository
        if ctx.obj["github_username"] or ctx.obj["github_pat_token"] or ctx.obj["credential_store"].exists():
            credentials = _resolve_credentials(ctx)
    else:
        credentials = _resolve_credentials(ctx)
        owner, name = asyncio.run(split_repository_in_configuration(repository, default_owner=credentials.username))
        url = build_clone_url(web_url_from_api_url(ctx.obj["github_api_url"]), owner, name)

    last_percentage: list[int] = [-1]

    def report_progress(line: str) -> None:
        if line.startswith("Cloning"):
            typer.echo(line)
            return
        percentage = parse_progress_percentage(line)
        if percentage is not None and percentage // 10 != last_percentage[0] // 10:
            last_percentage[0] = percentage
            typer.echo(f"{line.split(':', 1)[0]}: {percentage}%")

    try:
        target = clone_repository(url, _resolve_directory(directory), credentials=credentials, overwrite=overwrite, progress=report_progress)
    except DestinationExistsError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(EXIT_FAILURE) from exc
    except CloneError as exc:
        typer.echo(f"{exc}\nPlease check the URL and your credentials.", err=True)
        raise typer.Exit(EXIT_FAILURE) from exc
    typer.echo(f"Repository cloned successfully! Location: {target}")


@typer_app.command(name="info")
def info_cli(
    ctx: typer.Context,
    directory: Annotated[Path, Argument(help="Working directory whose name is the default repository name.")] = Path("."),
    name: Annotated[str | None, Option("--name", "-n", help="Repository name (repo or owner/repo).")] = None,
) -> None:
    """Show information about a GitHub repository."""
    credentials = _resolve_credentials(ctx)
    repo = name or derive_repository_name(directory)

    async def fetch_info() -> RepositoryInfo:
        owner, repo_name = await split_repository_in_configuration(repo, default_owner=credentials.username)
        adapter = await GitHubKitAdapter.create(credentials=credentials, github_api_url=ctx.obj["github_api_url"])
        return await get_repository_info(adapter, owner, repo_name)

    try:
        info = asyncio.run(fetch_info())
    except SyncError as exc:
        raise _fail(ctx, exc, credentials) from exc

    typer.echo(f"Repository Information: {info.full_name}")
    typer.echo(f"Description: {info.description or 'No description'}")
    typer.echo(f"Visibility: {'private' if info.private else 'public'}")
    typer.echo(f"Stars: {info.stars}")
    typer.echo(f"Forks: {info.forks}")
    typer.echo(f"Open Issues: {info.open_issues}")
    typer.echo(f"URL: {info.url}")
    typer.echo(f"Created: {info.created or 'unknown'}")
    typer.echo(f"Last Updated: {info.updated or 'unknown'}")


@typer_app.command(name="issues")
def issues_cli(
    ctx: typer.Context,
    directory: Annotated[Path, Argument(help="Working directory whose name is the default repository name.")] = Path("."),
    name: Annotated[str | None, Option("--name", "-n", help="Repository name (repo or owner/repo).")] = None,
    state: Annotated[str, Option(help="Filter issues by state (open, closed, all).")] = "all",
    verbose: Annotated[bool, Option("--verbose", "-v", help="List every issue.")] = False,
) -> None:
    """Summarize the issues of a GitHub repository."""
    if state not in ("open", "closed", "all"):
        typer.echo(f"Invalid state '{state}'. Use open, closed or all.", err=True)
        raise typer.Exit(EXIT_FAILURE)
    issue_state: Literal["open", "closed", "all"] = state  # type: ignore[assignment]
    credentials = _resolve_credentials(ctx)
    repo = name or derive_repository_name(directory)

    async def fetch_summary() -> IssuesSummary:
        owner, repo_name = await split_repository_in_configuration(repo, default_owner=credentials.username)
        adapter = await GitHubKitAdapter.create(credentials=credentials, github_api_url=ctx.obj["github_api_url"])
        return await summarize_issues(adapter, owner, repo_name, state=issue_state)

    try:
        summary = asyncio.run(fetch_summary())
    except SyncError as exc:
        raise _fail(ctx, exc, credentials) from exc

    typer.echo(f"Issues Summary: {summary.full_name}")
    typer.echo(f"Total Issues: {summary.total}")
    typer.echo(f"Open Issues: {summary.open}")
    typer.echo(f"Closed Issues: {summary.closed}")
    if verbose:
        for issue in summary.issues:
            kind = "PR" if issue.is_pull_request else "Issue"
            typer.echo(f"  #{issue.number} [{issue.state}] {kind}: {issue.title}")


@typer_app.command(name="license")
def license_cli(
    ctx: typer.Context,
    choice: Annotated[str, Argument(help="License to render: MIT, Apache-2.0 or GPL-3.0.")],
    owner: Annotated[str | None, Option(help="Copyright holder. Defaults to the configured GitHub username.")] = None,
    year: Annotated[int | None, Option(help="Copyright year. Defaults to the current year.")] = None,
    output: Annotated[Path | None, Option(help="Write the license to this file instead of stdout.")] = None,
) -> None:
    """Render a license text."""
    if owner is None:
        owner = _resolve_credentials(ctx).username
    try:
        text = materialize_license(choice, owner, year or datetime.date.today().year)
    except UnsupportedLicenseError as exc:
        raise _fail(ctx, exc) from exc
    if output is None:
        typer.echo(text, nl=False)
    else:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Wrote {choice} license to {output}")


@typer_app.command(name="login")
def login_cli(
    ctx: typer.Context,
    username: Annotated[str | None, Option(help="GitHub username.")] = None,
    token: Annotated[str | None, Option(help="GitHub Personal Access Token.")] = None,
) -> None:
    """Validate GitHub credentials and store them for later commands."""
    username = username or ctx.obj["github_username"] or typer.prompt("Username")
    token = token or ctx.obj["github_pat_token"] or typer.prompt("Personal Access Token", hide_input=True)
    credentials = Credentials(username=username, access_token=token)

    async def check() -> str:
        adapter = await GitHubKitAdapter.create(credentials=credentials, github_api_url=ctx.obj["github_api_url"])
        return await validate_credentials(adapter, credentials)

    try:
        login = asyncio.run(check())
    except AuthError as exc:
        typer.echo(
            "Invalid GitHub credentials. Please check your username and token.\nMake sure your token has the 'repo' scope enabled.",
            err=True,
        )
        raise typer.Exit(exc.exit_code) from exc
    except SyncError as exc:
        raise _fail(ctx, exc) from exc

    store: CredentialStore = ctx.obj["credential_store"]
    store.save(credentials)
    typer.echo(f"Logged in as {login}. Credentials saved to {store.path}")


@typer_app.command(name="delete-credentials")
def delete_credentials_cli(ctx: typer.Context) -> None:
    """Delete the stored account credentials."""
    store: CredentialStore = ctx.obj["credential_store"]
    if store.delete():
        typer.echo("Account credentials deleted successfully.")
    else:
        typer.echo("No account credentials found.")


@typer_app.command(name="token-help")
def token_help_cli() -> None:
    """Explain how to create a GitHub Personal Access Token."""
    typer.echo(TOKEN_HELP)


if __name__ == "__main__":
    typer_app()
