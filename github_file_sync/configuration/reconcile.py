"""Reconcile configuration between CLI arguments, environment variables and config files."""

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import structlog
from dotenv import dotenv_values

from github_file_sync.configuration.exceptions import ConfigurationFileNotFoundError, RequiredConfigurationElementError
from github_file_sync.configuration.models import (
    CommitIdentity,
    GitHubAuthenticationType,
    PullRequestSpec,
    SourceRef,
    SyncConfig,
    TargetSettings,
)
from github_file_sync.utils.constants import DEFAULT_GIT_REMOTE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ConfigurationElement:
    """A configuration key together with the ways a user can provide it."""

    env_name: str
    name: str
    cli_name: str


# Validation order matters: the first missing element is the one reported.
REQUIRED_CONFIGURATION_ELEMENTS: tuple[ConfigurationElement, ...] = (
    ConfigurationElement("SOURCE_OWNER", "Source repository owner", "--source-owner"),
    ConfigurationElement("SOURCE_REPO", "Source repository name", "--source-repo"),
    ConfigurationElement("SOURCE_BRANCH", "Source branch", "--source-branch"),
    ConfigurationElement("SOURCE_PATH", "Source file path", "--source-path"),
    ConfigurationElement("TARGET_PATH", "Target file path", "--target-path"),
    ConfigurationElement("GIT_AUTHOR_NAME", "Commit author name", "--git-author-name"),
    ConfigurationElement("GIT_AUTHOR_EMAIL", "Commit author email", "--git-author-email"),
    ConfigurationElement("COMMIT_MESSAGE", "Commit message", "--commit-message"),
    ConfigurationElement("GITHUB_API_BASE", "GitHub API base URL", "--github-api-base"),
    ConfigurationElement("PR_BRANCH_NAME", "Sync branch name", "--pr-branch-name"),
    ConfigurationElement("PR_TITLE", "Pull request title", "--pr-title"),
    ConfigurationElement("PR_BODY", "Pull request body", "--pr-body"),
    ConfigurationElement("BASE_BRANCH", "Base branch", "--base-branch"),
)


def load_configuration_file(config_file: Path | None) -> dict[str, str]:
    """Load KEY=value pairs from a dotenv-style configuration file.

    Returns an empty mapping when no file was requested.

    Raises:
        ConfigurationFileNotFoundError: If a file was requested but does not exist.
    """
    if config_file is None:
        return {}
    if not config_file.is_file():
        raise ConfigurationFileNotFoundError(config_file)
    logger.debug("Loading configuration file", config_file=str(config_file))
    return {key: value for key, value in dotenv_values(config_file).items() if value is not None}


def merge_configuration_sources(cli_values: Mapping[str, str | None], file_values: Mapping[str, str]) -> dict[str, str]:
    """Merge values, preferring CLI arguments and environment variables over the config file.

    Empty strings are treated the same as unset values.
    """
    merged: dict[str, str] = {key: value for key, value in file_values.items() if value}
    for key, value in cli_values.items():
        if value:
            merged[key] = value
    return merged


def validate_required_configuration(values: Mapping[str, str]) -> None:
    """Ensure every required configuration element has a non-empty value.

    Raises:
        RequiredConfigurationElementError: For the first missing element, in declaration order.
    """
    for element in REQUIRED_CONFIGURATION_ELEMENTS:
        if not values.get(element.env_name):
            raise RequiredConfigurationElementError(name=element.name, cli_name=element.cli_name, env_name=element.env_name)


async def determine_github_authentication_type(github_token: str | None) -> GitHubAuthenticationType:
    """Determine how requests to GitHub are authenticated.

    Args:
        github_token (str | None): The bearer credential, if one is configured.

    Returns:
        GitHubAuthenticationType: TOKEN when a credential is present, ANONYMOUS otherwise.
    """
    if github_token:
        return GitHubAuthenticationType.TOKEN
    logger.warning("No GitHub credential configured, requests are unauthenticated and subject to anonymous rate limits")
    return GitHubAuthenticationType.ANONYMOUS


async def reconcile_sync_configuration(
    cli_values: Mapping[str, str | None],
    config_file: Path | None = None,
    github_token: str | None = None,
    repo_path: Path = Path("."),
    debug: bool = False,
) -> SyncConfig:
    """Build the immutable run configuration from every configuration source.

    Args:
        cli_values: Values from CLI options (or their environment variables), keyed by environment variable name.
        config_file: Optional dotenv-style configuration file, used for keys not given on the CLI or in the environment.
        github_token: The bearer credential from the environment, if any.
        repo_path: Path inside the target repository's working tree.
        debug: Whether debug logging is enabled.

    Raises:
        ConfigurationFileNotFoundError: If the requested configuration file does not exist.
        RequiredConfigurationElementError: If a required element is missing from every source.
    """
    file_values = load_configuration_file(config_file)
    values = merge_configuration_sources(cli_values, file_values)
    validate_required_configuration(values)

    token = github_token or values.get("GH_TOKEN") or values.get("GITHUB_PAT_TOKEN") or None
    github_auth_type = await determine_github_authentication_type(token)

    config = SyncConfig(
        source=SourceRef(
            owner=values["SOURCE_OWNER"],
            repo=values["SOURCE_REPO"],
            branch=values["SOURCE_BRANCH"],
            path=values["SOURCE_PATH"],
        ),
        target=TargetSettings(
            path=values["TARGET_PATH"],
            base_branch=values["BASE_BRANCH"],
            sync_branch=values["PR_BRANCH_NAME"],
            remote=values.get("GIT_REMOTE", DEFAULT_GIT_REMOTE),
        ),
        commit=CommitIdentity(
            author_name=values["GIT_AUTHOR_NAME"],
            author_email=values["GIT_AUTHOR_EMAIL"],
            message=values["COMMIT_MESSAGE"],
        ),
        pull_request=PullRequestSpec(title=values["PR_TITLE"], body=values["PR_BODY"]),
        github_api_url=values["GITHUB_API_BASE"].rstrip("/"),
        github_auth_type=github_auth_type,
        github_token=token,
        repo_path=repo_path,
        debug=debug,
    )
    logger.debug(
        "Reconciled configuration",
        source=f"{config.source.full_name}@{config.source.branch}:{config.source.path}",
        target_path=config.target.path,
        base_branch=config.target.base_branch,
        sync_branch=config.target.sync_branch,
        github_api_url=config.github_api_url,
        github_auth_type=config.github_auth_type.value,
    )
    return config
