"""Models for configuration between CLI arguments, environment variables and config files."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from github_file_sync.utils.constants import DEFAULT_GIT_REMOTE


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    TOKEN = "token"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class SourceRef:
    """Identifies the file being mirrored."""

    owner: str
    repo: str
    branch: str
    path: str

    @property
    def full_name(self) -> str:
        """Return the source repository in 'owner/repo' format."""
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class TargetSettings:
    """Configured half of the target: where the file lands and which branches carry it."""

    path: str
    base_branch: str
    sync_branch: str
    remote: str = DEFAULT_GIT_REMOTE


@dataclass(frozen=True)
class TargetRef:
    """Fully resolved target, with owner and repository taken from the git remote."""

    owner: str
    repo: str
    path: str
    base_branch: str
    sync_branch: str
    remote: str = DEFAULT_GIT_REMOTE

    @classmethod
    def from_settings(cls, owner: str, repo: str, settings: TargetSettings) -> "TargetRef":
        """Combine the resolved repository identity with the configured target settings."""
        return cls(
            owner=owner,
            repo=repo,
            path=settings.path,
            base_branch=settings.base_branch,
            sync_branch=settings.sync_branch,
            remote=settings.remote,
        )

    @property
    def full_name(self) -> str:
        """Return the target repository in 'owner/repo' format."""
        return f"{self.owner}/{self.repo}"

    @property
    def head(self) -> str:
        """Return the sync branch qualified with the owner, as the pulls API expects it."""
        return f"{self.owner}:{self.sync_branch}"


@dataclass(frozen=True)
class CommitIdentity:
    """Author identity and message for commits made by the tool."""

    author_name: str
    author_email: str
    message: str


@dataclass(frozen=True)
class PullRequestSpec:
    """Title and body of the pull request opened for the sync branch."""

    title: str
    body: str


@dataclass(frozen=True)
class SyncConfig:
    """Configuration for a single synchronization run."""

    source: SourceRef
    target: TargetSettings
    commit: CommitIdentity
    pull_request: PullRequestSpec
    github_api_url: str
    github_auth_type: GitHubAuthenticationType
    github_token: str | None
    repo_path: Path
    debug: bool = False
