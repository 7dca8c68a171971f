"""Resolves the target repository from the local git remote."""

import structlog

from github_file_sync.git.repository import GitCommandError, GitRepository
from github_file_sync.synchronize.exceptions import UnparsableRemoteError
from github_file_sync.utils.github import RepositoryIdentity, parse_remote_url

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def resolve_target_repository(repository: GitRepository, remote: str) -> RepositoryIdentity:
    """Derive the target repository's owner and name from the URL of a git remote.

    Raises:
        UnparsableRemoteError: If the remote is not configured or its URL cannot be parsed.
    """
    try:
        remote_url = repository.get_remote_url(remote)
    except GitCommandError as exc:
        raise UnparsableRemoteError(f"<remote '{remote}'>", exc.stderr.strip() or "remote is not configured") from exc
    identity = parse_remote_url(remote_url)
    logger.info("Resolved target repository from git remote", remote=remote, owner=identity.owner, repo=identity.repo)
    return identity
