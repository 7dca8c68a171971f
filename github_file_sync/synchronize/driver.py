"""Orchestrates the synchronization of the mirrored file."""

import time
from typing import Callable

import structlog

from github_file_sync.configuration.models import SyncConfig, TargetRef
from github_file_sync.git.repository import GitCommandError, GitRepository
from github_file_sync.github.abc import GitHubClientBase
from github_file_sync.github.adapter import GitHubKitAdapter
from github_file_sync.github.client import get_github_client
from github_file_sync.synchronize.branches import reconcile_sync_branch
from github_file_sync.synchronize.commit import apply_content_and_push
from github_file_sync.synchronize.content import fetch_optional_content, fetch_source_content
from github_file_sync.synchronize.decision import decide_sync_action
from github_file_sync.synchronize.exceptions import BranchReconcileError
from github_file_sync.synchronize.identity import resolve_target_repository
from github_file_sync.synchronize.models import SyncBranchState, SyncDecision
from github_file_sync.synchronize.pull_requests import create_sync_pull_request, find_open_pull_request
from github_file_sync.synchronize.results import FileSyncResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

AdapterFactory = Callable[[str, str], GitHubClientBase]
"""Builds a GitHub adapter bound to (owner, repo)."""


async def build_adapter_factory(config: SyncConfig) -> AdapterFactory:
    """Create one GitHub client for the run and return a factory for per-repository adapters."""
    logger.info(
        "Creating client for GitHub instance",
        github_api_url=config.github_api_url,
        github_auth_type=config.github_auth_type.value,
    )
    client = await get_github_client(
        github_auth_type=config.github_auth_type,
        github_token=config.github_token,
        github_api_url=config.github_api_url,
    )

    def factory(owner: str, repo: str) -> GitHubClientBase:
        return GitHubKitAdapter(client, owner, repo)

    return factory


async def run_file_sync_workflow(config: SyncConfig, repository: GitRepository, adapter_factory: AdapterFactory) -> FileSyncResult:
    """Run one reconciliation: mirror the source file onto the sync branch and make sure a pull request carries it.

    Steps run strictly in order and the first failure aborts the run:
    fetch the source content, resolve the target repository, reconcile the
    sync branch, look up an open pull request, decide, then commit/push and
    open the pull request as the decision requires.
    """
    start_time = time.time()
    source_adapter = adapter_factory(config.source.owner, config.source.repo)
    content = await fetch_source_content(source_adapter, config.source)

    identity = resolve_target_repository(repository, config.target.remote)
    target = TargetRef.from_settings(identity.owner, identity.repo, config.target)
    target_adapter = adapter_factory(target.owner, target.repo)

    branch_state = reconcile_sync_branch(repository, target)
    pull_request = await find_open_pull_request(target_adapter, target)

    pull_request_content: bytes | None = None
    working_tree_content: bytes | None = None
    if pull_request is not None:
        pull_request_content = await fetch_optional_content(target_adapter, target.path, pull_request.head_branch)
    else:
        working_tree_content = repository.read_worktree_file(target.path)

    decision = decide_sync_action(content, pull_request, pull_request_content, working_tree_content, branch_state)
    logger.info("Decided synchronization action", decision=decision.value, branch_state=branch_state.value)
    result = FileSyncResult(target=target, decision=decision, branch_state=branch_state, pull_request=pull_request)
    if decision is SyncDecision.NOOP:
        logger.info("Nothing to do", duration=round(time.time() - start_time, 2))
        return result

    commit_sha = apply_content_and_push(repository, decision, content, target, config.commit)
    result.committed = commit_sha is not None
    result.commit_sha = commit_sha

    # Without a new commit, a pull request is only opened for commits an
    # earlier run already pushed to the sync branch.
    if decision.creates_pull_request and pull_request is None and (result.committed or branch_state is SyncBranchState.EXISTS_WITH_COMMITS):
        result.pull_request = await create_sync_pull_request(target_adapter, target, config.pull_request)
        result.pull_request_created = True
    elif pull_request is not None and result.committed:
        logger.info("Updated existing pull request", pr_number=pull_request.number)

    logger.info(
        "Finished synchronization",
        decision=decision.value,
        committed=result.committed,
        pull_request_created=result.pull_request_created,
        duration=round(time.time() - start_time, 2),
    )
    return result


async def plan_file_sync_workflow(config: SyncConfig, repository: GitRepository, adapter_factory: AdapterFactory) -> FileSyncResult:
    """Decide what a run would do without touching the working tree or pushing anything.

    Only remote-tracking refs are updated (by fetching). Without an open pull
    request the fetched content is compared with the file as committed on the
    remote sync branch, or on the base branch when the sync branch does not
    exist yet.
    """
    source_adapter = adapter_factory(config.source.owner, config.source.repo)
    content = await fetch_source_content(source_adapter, config.source)

    identity = resolve_target_repository(repository, config.target.remote)
    target = TargetRef.from_settings(identity.owner, identity.repo, config.target)
    target_adapter = adapter_factory(target.owner, target.repo)

    try:
        repository.fetch(target.remote)
        if repository.remote_branch_exists(target.remote, target.sync_branch):
            comparison_ref = f"{target.remote}/{target.sync_branch}"
            commits_ahead = repository.count_commits_between(f"{target.remote}/{target.base_branch}", comparison_ref)
            branch_state = SyncBranchState.EXISTS_WITH_COMMITS if commits_ahead > 0 else SyncBranchState.EXISTS_NO_DIVERGENCE
        else:
            comparison_ref = f"{target.remote}/{target.base_branch}"
            branch_state = SyncBranchState.ABSENT
        committed_content = repository.read_committed_file(comparison_ref, target.path)
    except GitCommandError as exc:
        raise BranchReconcileError(target.sync_branch, str(exc)) from exc

    pull_request = await find_open_pull_request(target_adapter, target)
    pull_request_content: bytes | None = None
    if pull_request is not None:
        pull_request_content = await fetch_optional_content(target_adapter, target.path, pull_request.head_branch)

    decision = decide_sync_action(content, pull_request, pull_request_content, committed_content, branch_state)
    logger.info("Planned synchronization action", decision=decision.value, branch_state=branch_state.value, comparison_ref=comparison_ref)
    return FileSyncResult(target=target, decision=decision, branch_state=branch_state, pull_request=pull_request, dry_run=True)
