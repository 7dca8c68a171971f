"""Internal data models for the synchronization state machine."""

from dataclasses import dataclass
from enum import Enum


class SyncDecision(Enum):
    """Enum for the action chosen by the convergence engine."""

    NOOP = "noop"
    UPDATE_ONLY = "update_only"
    CREATE_BRANCH_COMMIT_PUSH = "create_branch_commit_push"
    CREATE_BRANCH_COMMIT_PUSH_AND_PR = "create_branch_commit_push_and_pr"

    @property
    def changes_content(self) -> bool:
        """Whether the decision writes, commits and pushes the file."""
        return self is not SyncDecision.NOOP

    @property
    def creates_pull_request(self) -> bool:
        """Whether the decision opens a pull request when none exists."""
        return self is SyncDecision.CREATE_BRANCH_COMMIT_PUSH_AND_PR


class SyncBranchState(Enum):
    """Enum for the state of the sync branch after it has been reconciled."""

    ABSENT = "absent"
    EXISTS_NO_DIVERGENCE = "exists_no_divergence"
    EXISTS_WITH_COMMITS = "exists_with_commits"


@dataclass(frozen=True)
class PullRequestRef:
    """An open pull request carrying the sync branch."""

    number: int
    head_branch: str
    base_branch: str
    state: str = "open"
    html_url: str | None = None
