"""Contains results of application execution."""

from github_file_sync.configuration.models import TargetRef
from github_file_sync.synchronize.models import PullRequestRef, SyncBranchState, SyncDecision


class FileSyncResult:
    """Contains results of a single file synchronization run."""

    def __init__(
        self,
        target: TargetRef,
        decision: SyncDecision,
        branch_state: SyncBranchState | None = None,
        pull_request: PullRequestRef | None = None,
        committed: bool = False,
        commit_sha: str | None = None,
        pull_request_created: bool = False,
        dry_run: bool = False,
    ) -> None:
        """Initialize the result with the decision taken and the side effects performed."""
        self.target = target
        self.decision = decision
        self.branch_state = branch_state
        self.pull_request = pull_request
        self.committed = committed
        self.commit_sha = commit_sha
        self.pull_request_created = pull_request_created
        self.dry_run = dry_run

    def summary(self) -> str:
        """Return a one-line, human-readable description of the outcome."""
        if self.dry_run:
            return f"Planned action for {self.target.full_name}:{self.target.path}: {self.decision.value}"
        if self.decision is SyncDecision.NOOP:
            if self.pull_request is not None:
                return f"Content in existing PR #{self.pull_request.number} is identical to downloaded content. No action needed."
            return "Content is already up to date. No action needed."
        if not self.committed and not self.pull_request_created:
            return "No changes to commit after staging. Content is already up to date."
        if self.pull_request_created and self.pull_request is not None:
            return f"Created PR #{self.pull_request.number} from {self.target.sync_branch} into {self.target.base_branch}"
        if self.pull_request is not None:
            return f"Updated existing PR #{self.pull_request.number}"
        return f"Pushed {self.target.path} to {self.target.sync_branch}"
