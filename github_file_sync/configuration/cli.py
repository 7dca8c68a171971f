"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv
from typer import Option
from typing_extensions import Annotated

from github_file_sync.configuration.env import Settings
from github_file_sync.configuration.exceptions import ConfigurationFileNotFoundError, RequiredConfigurationElementError
from github_file_sync.configuration.models import SyncConfig
from github_file_sync.configuration.reconcile import reconcile_sync_configuration
from github_file_sync.git.repository import GitCommandError, GitRepository
from github_file_sync.synchronize.driver import build_adapter_factory, plan_file_sync_workflow, run_file_sync_workflow
from github_file_sync.synchronize.exceptions import FileSyncError
from github_file_sync.synchronize.results import FileSyncResult
from github_file_sync.utils.constants import DEFAULT_GITHUB_API_URL
from github_file_sync.utils.logging import configure_logging

load_dotenv()

typer_app = typer.Typer(
    help="Mirror a single file from a source repository into this repository through a sync branch and pull request.",
    pretty_exceptions_show_locals=False,
)

# Configuration keys in the order the callback receives their CLI options.
CONFIGURATION_KEYS = (
    "SOURCE_OWNER",
    "SOURCE_REPO",
    "SOURCE_BRANCH",
    "SOURCE_PATH",
    "TARGET_PATH",
    "GIT_AUTHOR_NAME",
    "GIT_AUTHOR_EMAIL",
    "COMMIT_MESSAGE",
    "GITHUB_API_BASE",
    "PR_BRANCH_NAME",
    "PR_TITLE",
    "PR_BODY",
    "BASE_BRANCH",
    "GIT_REMOTE",
)


@typer_app.callback()
def configuration_callback(
    ctx: typer.Context,
    config_file: Annotated[Path | None, Option(envvar="CONFIG_FILE", help="Path to a KEY=value configuration file.")] = None,
    repo_path: Annotated[Path, Option(envvar="REPO_PATH", help="Path inside the target repository's working tree.")] = Path("."),
    source_owner: Annotated[str | None, Option(envvar="SOURCE_OWNER", help="Owner of the source repository.")] = None,
    source_repo: Annotated[str | None, Option(envvar="SOURCE_REPO", help="Name of the source repository.")] = None,
    source_branch: Annotated[str | None, Option(envvar="SOURCE_BRANCH", help="Branch, tag or SHA to read the source file from.")] = None,
    source_path: Annotated[str | None, Option(envvar="SOURCE_PATH", help="Path of the file in the source repository.")] = None,
    target_path: Annotated[str | None, Option(envvar="TARGET_PATH", help="Path of the mirrored file in this repository.")] = None,
    git_author_name: Annotated[str | None, Option(envvar="GIT_AUTHOR_NAME", help="Author name for sync commits.")] = None,
    git_author_email: Annotated[str | None, Option(envvar="GIT_AUTHOR_EMAIL", help="Author email for sync commits.")] = None,
    commit_message: Annotated[str | None, Option(envvar="COMMIT_MESSAGE", help="Message for sync commits.")] = None,
    github_api_base: Annotated[str | None, Option(envvar="GITHUB_API_BASE", help=f"GitHub API base URL, e.g. {DEFAULT_GITHUB_API_URL}.")] = None,
    pr_branch_name: Annotated[str | None, Option(envvar="PR_BRANCH_NAME", help="Name of the sync branch.")] = None,
    pr_title: Annotated[str | None, Option(envvar="PR_TITLE", help="Title of the sync pull request.")] = None,
    pr_body: Annotated[str | None, Option(envvar="PR_BODY", help="Body of the sync pull request.")] = None,
    base_branch: Annotated[str | None, Option(envvar="BASE_BRANCH", help="Branch the sync pull request targets.")] = None,
    git_remote: Annotated[str | None, Option(envvar="GIT_REMOTE", help="Git remote of the target repository (default: origin).")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Collect configuration shared by every command."""
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["repo_path"] = repo_path
    ctx.obj["debug"] = debug
    ctx.obj["cli_values"] = dict(
        zip(
            CONFIGURATION_KEYS,
            (
                source_owner,
                source_repo,
                source_branch,
                source_path,
                target_path,
                git_author_name,
                git_author_email,
                commit_message,
                github_api_base,
                pr_branch_name,
                pr_title,
                pr_body,
                base_branch,
                git_remote,
            ),
        )
    )


def load_sync_configuration(ctx_obj: dict[str, Any]) -> SyncConfig:
    """Reconcile the run configuration, exiting with status 1 if it is incomplete."""
    settings = Settings()
    debug: bool = ctx_obj["debug"] or settings.DEBUG
    configure_logging(debug)
    try:
        return asyncio.run(
            reconcile_sync_configuration(
                cli_values=ctx_obj["cli_values"],
                config_file=ctx_obj["config_file"] or settings.CONFIG_FILE,
                github_token=settings.github_token,
                repo_path=ctx_obj["repo_path"],
                debug=debug,
            )
        )
    except (RequiredConfigurationElementError, ConfigurationFileNotFoundError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def open_repository(config: SyncConfig) -> GitRepository:
    """Open the target repository's working tree, exiting with status 1 if it is not a git repository."""
    try:
        return GitRepository.from_path(config.repo_path)
    except GitCommandError as exc:
        typer.echo(f"Not inside a git working tree: {config.repo_path.absolute()} ({exc.stderr.strip()})", err=True)
        raise typer.Exit(1) from exc


def echo_result(result: FileSyncResult) -> None:
    """Print a short summary of the run."""
    typer.echo(result.summary())
    typer.echo(f"  Target repository: {result.target.full_name}")
    typer.echo(f"  Target path: {result.target.path}")
    typer.echo(f"  Sync branch: {result.target.sync_branch} -> {result.target.base_branch}")
    typer.echo(f"  Decision: {result.decision.value}")
    if result.branch_state is not None:
        typer.echo(f"  Branch state: {result.branch_state.value}")
    if result.commit_sha is not None:
        typer.echo(f"  Commit: {result.commit_sha}")
    if result.pull_request is not None:
        typer.echo(f"  Pull request: #{result.pull_request.number}")


@typer_app.command(name="sync")
def sync_cli(ctx: typer.Context) -> None:
    """Mirror the source file onto the sync branch and open a pull request when none exists."""
    config = load_sync_configuration(ctx.obj)
    repository = open_repository(config)

    async def run() -> FileSyncResult:
        adapter_factory = await build_adapter_factory(config)
        return await run_file_sync_workflow(config, repository, adapter_factory)

    try:
        result = asyncio.run(run())
    except FileSyncError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    echo_result(result)


@typer_app.command(name="plan")
def plan_cli(ctx: typer.Context) -> None:
    """Show the action a sync would take, without changing the working tree or the remote."""
    config = load_sync_configuration(ctx.obj)
    repository = open_repository(config)

    async def run() -> FileSyncResult:
        adapter_factory = await build_adapter_factory(config)
        return await plan_file_sync_workflow(config, repository, adapter_factory)

    try:
        result = asyncio.run(run())
    except FileSyncError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    echo_result(result)


if __name__ == "__main__":
    typer_app()
