# This file is intended to hold the setup for the githubkit client.

"""Sets up the githubkit client, authenticated when a credential is configured."""

from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy, UnauthAuthStrategy

from github_file_sync.configuration.models import GitHubAuthenticationType

GitHubClient: TypeAlias = GitHub[TokenAuthStrategy] | GitHub[UnauthAuthStrategy]


async def get_github_token_client(github_token: str, github_api_url: str) -> GitHub[TokenAuthStrategy]:
    """Returns a GitHub client that sends the bearer credential with every request."""
    # Disable HTTP caching to always get fresh data
    return GitHub(auth=TokenAuthStrategy(github_token), base_url=github_api_url, http_cache=False)


async def get_github_anonymous_client(github_api_url: str) -> GitHub[UnauthAuthStrategy]:
    """Returns an unauthenticated GitHub client."""
    # Disable HTTP caching to always get fresh data
    return GitHub(auth=UnauthAuthStrategy(), base_url=github_api_url, http_cache=False)


async def get_github_client(
    github_auth_type: GitHubAuthenticationType,
    github_token: str | None,
    github_api_url: str,
) -> GitHubClient:
    """Returns a GitHub client for the configured authentication type.

    Supports custom base URL for GitHub Enterprise Server (GHES).
    Raises RuntimeError if token authentication is requested without a token.
    """
    if github_auth_type == GitHubAuthenticationType.TOKEN:
        if not github_token:
            raise RuntimeError("GitHub token authentication requires a github_token in config.")
        return await get_github_token_client(github_token, github_api_url)
    return await get_github_anonymous_client(github_api_url)
