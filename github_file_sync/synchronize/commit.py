"""Contains logic for writing, committing and pushing the mirrored file."""

import structlog

from github_file_sync.configuration.models import CommitIdentity, TargetRef
from github_file_sync.git.repository import GitCommandError, GitRepository
from github_file_sync.synchronize.exceptions import CommitPushError
from github_file_sync.synchronize.models import SyncDecision

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def apply_content_and_push(
    repository: GitRepository,
    decision: SyncDecision,
    content: bytes,
    target: TargetRef,
    commit: CommitIdentity,
) -> str | None:
    """Write the content to the target path, then commit and push it to the sync branch.

    Each step must succeed before the next one runs. After staging, the index
    is compared against the branch tip again: when nothing changed (for example
    because another run pushed the same content in the meantime) no commit is
    made and None is returned.

    Returns:
        The SHA of the pushed commit, or None if there was nothing to commit.

    Raises:
        CommitPushError: If writing, staging, committing or pushing fails.
    """
    if not decision.changes_content:
        raise ValueError(f"Decision {decision.value} does not change content")

    step = "write target file"
    try:
        written_path = repository.write_worktree_file(target.path, content)
        logger.info("Wrote target file", path=str(written_path), size=len(content))

        step = "stage target file"
        repository.add(target.path)
        if not repository.has_staged_changes(target.path):
            logger.info("No changes to commit after staging, content is already up to date", path=target.path)
            return None

        step = "commit target file"
        repository.commit(target.path, commit.message, commit.author_name, commit.author_email)
        commit_sha = repository.head_sha()
        logger.info("Committed target file", path=target.path, branch=target.sync_branch, commit_sha=commit_sha)

        step = "push branch"
        logger.info("Pushing branch", branch=target.sync_branch, remote=target.remote)
        repository.push_upstream(target.remote, target.sync_branch)
    except (GitCommandError, OSError) as exc:
        logger.error("Failed to commit and push target file", step=step, branch=target.sync_branch, error=str(exc))
        raise CommitPushError(target.sync_branch, step, str(exc)) from exc
    logger.info("Pushed branch", branch=target.sync_branch, commit_sha=commit_sha)
    return commit_sha
