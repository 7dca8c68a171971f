"""Contains exceptions raised while synchronizing the mirrored file.

Every exception in this module aborts the current run. None of them are
retried; the next scheduled run starts again from the remote state.
"""

from enum import Enum


class FileSyncError(Exception):
    """Base class for errors that abort a synchronization run."""

    pass


class UnparsableRemoteError(FileSyncError):
    """Raised when the target repository cannot be derived from the git remote URL."""

    def __init__(self, remote_url: str, reason: str | None = None) -> None:
        """Initializes the exception with the offending remote URL."""
        message = f"Failed to parse repository owner/name from git remote: {remote_url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.remote_url = remote_url
        self.reason = reason


class FetchFailureReason(str, Enum):
    """Enum for the reasons a content fetch can fail."""

    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    NETWORK = "network"


class ContentFetchFailedError(FileSyncError):
    """Raised when file content cannot be retrieved from the content store."""

    def __init__(self, owner: str, repo: str, ref: str, path: str, reason: FetchFailureReason, detail: str = "") -> None:
        """Initializes the exception with the location that could not be fetched."""
        message = f"Failed to fetch {owner}/{repo}:{path} at ref '{ref}' ({reason.value})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.owner = owner
        self.repo = repo
        self.ref = ref
        self.path = path
        self.reason = reason


class BranchReconcileError(FileSyncError):
    """Raised when the sync branch cannot be fetched, created or checked out."""

    def __init__(self, branch: str, detail: str) -> None:
        """Initializes the exception with the branch being reconciled."""
        super().__init__(f"Failed to reconcile branch '{branch}': {detail}")
        self.branch = branch


class CommitPushError(FileSyncError):
    """Raised when writing, committing or pushing the mirrored file fails."""

    def __init__(self, branch: str, step: str, detail: str) -> None:
        """Initializes the exception with the step that failed."""
        super().__init__(f"Failed to {step} on branch '{branch}': {detail}")
        self.branch = branch
        self.step = step


class PullRequestQueryError(FileSyncError):
    """Raised when open pull requests for the sync branch cannot be listed."""

    def __init__(self, head: str, detail: str) -> None:
        """Initializes the exception with the head being searched for."""
        super().__init__(f"Failed to query open pull requests for head '{head}': {detail}")
        self.head = head


class PullRequestCreateError(FileSyncError):
    """Raised when the pull request service does not confirm creation of the pull request."""

    def __init__(self, head: str, base: str, status_code: int | None, detail: str = "") -> None:
        """Initializes the exception with the HTTP status returned by the service, if any."""
        status = f"HTTP {status_code}" if status_code is not None else "no HTTP status"
        message = f"Failed to create pull request from '{head}' into '{base}' ({status})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.head = head
        self.base = base
        self.status_code = status_code
