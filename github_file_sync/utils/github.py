"""Contains utility functions for GitHub interactions."""

import re
from dataclasses import dataclass

from github_file_sync.synchronize.exceptions import UnparsableRemoteError
from github_file_sync.utils.constants import REMOTE_URL_PATTERN

_remote_url_regex = re.compile(REMOTE_URL_PATTERN)


@dataclass(frozen=True)
class RepositoryIdentity:
    """Owner and name of a GitHub repository."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        """Return the repository in 'owner/repo' format."""
        return f"{self.owner}/{self.repo}"


def parse_remote_url(remote_url: str) -> RepositoryIdentity:
    """Derive the repository owner and name from a git remote URL.

    The owner and repository are the last two path segments after the host,
    with an optional trailing '.git' removed. Both slash-delimited URLs
    (https://github.com/owner/repo.git) and colon-delimited scp-like remotes
    (git@github.com:owner/repo.git) are accepted.

    Raises:
        UnparsableRemoteError: If the URL has no host or fewer than two path segments.
    """
    url = remote_url.strip()
    match = _remote_url_regex.match(url)
    if match is None:
        raise UnparsableRemoteError(remote_url, "expected a host-qualified URL")

    path = match.group("path").rstrip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    segments = path.split("/")
    if len(segments) < 2 or not all(segments):
        raise UnparsableRemoteError(remote_url, "expected '<owner>/<repo>' after the host")
    owner, repo = segments[-2], segments[-1]
    return RepositoryIdentity(owner=owner, repo=repo)
