"""Contains the convergence engine that decides how to reconcile the mirrored file.

The engine is a pure function of the fetched content and the remote state
observed during the run. It performs no I/O; every side effect it asks for is
carried out by the commit and pull request steps.
"""

import structlog

from github_file_sync.synchronize.models import PullRequestRef, SyncBranchState, SyncDecision

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def decide_sync_action(
    fetched_content: bytes,
    open_pull_request: PullRequestRef | None,
    pull_request_content: bytes | None = None,
    working_tree_content: bytes | None = None,
    branch_state: SyncBranchState | None = None,
) -> SyncDecision:
    """Decide the minimal action that brings the target in line with the fetched content.

    Rules are evaluated in order and the first match wins:

    1. An open pull request exists: NOOP if the file on its head branch is
       byte-identical to the fetched content, otherwise UPDATE_ONLY.
    2. No open pull request and the target path exists in the working tree:
       NOOP if identical, otherwise CREATE_BRANCH_COMMIT_PUSH_AND_PR.
    3. No open pull request and the target path is absent:
       CREATE_BRANCH_COMMIT_PUSH_AND_PR.

    Equality is byte-exact; line endings and trailing whitespace count.

    Args:
        fetched_content: The bytes fetched from the source repository.
        open_pull_request: The open pull request for the sync branch, if any.
        pull_request_content: The file on the pull request's head branch, None if absent.
        working_tree_content: The file in the working tree after branch reconciliation, None if absent.
        branch_state: State of the sync branch. When the branch already carries
            commits of its own but has no pull request (a previous run pushed and
            then failed to open it), identical content still asks for a pull request.
    """
    if open_pull_request is not None:
        if pull_request_content is not None and pull_request_content == fetched_content:
            logger.info("Existing pull request already carries the fetched content", pr_number=open_pull_request.number)
            return SyncDecision.NOOP
        logger.info("Content differs from existing pull request", pr_number=open_pull_request.number)
        return SyncDecision.UPDATE_ONLY

    if working_tree_content is None:
        logger.info("Target path is absent, starting first-time sync")
        return SyncDecision.CREATE_BRANCH_COMMIT_PUSH_AND_PR

    if working_tree_content == fetched_content:
        if branch_state is SyncBranchState.EXISTS_WITH_COMMITS:
            logger.info("Sync branch is up to date but has no pull request")
            return SyncDecision.CREATE_BRANCH_COMMIT_PUSH_AND_PR
        logger.info("Target path already matches the fetched content")
        return SyncDecision.NOOP

    logger.info("Target path differs from the fetched content")
    return SyncDecision.CREATE_BRANCH_COMMIT_PUSH_AND_PR
