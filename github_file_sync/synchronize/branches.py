"""Contains logic for reconciling the local sync branch with the remote."""

import structlog

from github_file_sync.configuration.models import TargetRef
from github_file_sync.git.repository import GitCommandError, GitRepository
from github_file_sync.synchronize.exceptions import BranchReconcileError
from github_file_sync.synchronize.models import SyncBranchState

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def _check_out_sync_branch(repository: GitRepository, target: TargetRef) -> SyncBranchState:
    remote_base = f"{target.remote}/{target.base_branch}"
    remote_sync = f"{target.remote}/{target.sync_branch}"
    repository.fetch(target.remote)
    if repository.remote_branch_exists(target.remote, target.sync_branch):
        logger.info("Sync branch already exists, resetting to remote tip", branch=target.sync_branch, remote=target.remote)
        repository.fetch(target.remote, target.sync_branch)
        repository.checkout_reset(target.sync_branch, remote_sync)
        commits_ahead = repository.count_commits_between(remote_base, target.sync_branch)
        state = SyncBranchState.EXISTS_WITH_COMMITS if commits_ahead > 0 else SyncBranchState.EXISTS_NO_DIVERGENCE
        logger.info("Checked out sync branch", branch=target.sync_branch, commits_ahead_of_base=commits_ahead, state=state.value)
        return state

    logger.info("Creating new sync branch from base branch", branch=target.sync_branch, start_point=remote_base)
    if repository.local_branch_exists(target.sync_branch):
        # A leftover local branch whose remote counterpart was deleted
        # (e.g. after its pull request was merged) starts over from base.
        logger.info("Discarding stale local sync branch", branch=target.sync_branch)
        repository.checkout_reset(target.sync_branch, remote_base)
    else:
        repository.checkout_new(target.sync_branch, remote_base)
    return SyncBranchState.ABSENT


def reconcile_sync_branch(repository: GitRepository, target: TargetRef) -> SyncBranchState:
    """Check out the sync branch so that it matches the remote before any comparison.

    If the branch exists on the remote it is fetched and the local branch is
    force-reset to the remote tip, discarding stale local state. Otherwise it
    is created from the remote tip of the base branch.

    Checkout does not touch untracked files, so an untracked copy of the
    target path left by an interrupted run is removed as well. Afterwards the
    working tree holds the target path exactly as committed on the branch tip.

    Raises:
        BranchReconcileError: If any fetch, checkout or clean fails.
    """
    try:
        state = _check_out_sync_branch(repository, target)
        repository.clean(target.path)
    except GitCommandError as exc:
        logger.error("Failed to reconcile sync branch", branch=target.sync_branch, error=str(exc))
        raise BranchReconcileError(target.sync_branch, str(exc)) from exc
    return state
