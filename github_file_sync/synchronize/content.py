"""Contains logic for fetching file content from the content store."""

import structlog
from githubkit.exception import RequestError, RequestFailed, RequestTimeout

from github_file_sync.configuration.models import SourceRef
from github_file_sync.github.abc import GitHubClientBase
from github_file_sync.synchronize.exceptions import ContentFetchFailedError, FetchFailureReason

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def classify_request_failure(exc: Exception) -> FetchFailureReason:
    """Map a failed GitHub request onto the reasons a fetch can fail."""
    if isinstance(exc, RequestFailed):
        status_code = exc.response.status_code
        if status_code == 404:
            return FetchFailureReason.NOT_FOUND
        if status_code in (401, 403):
            return FetchFailureReason.UNAUTHORIZED
    return FetchFailureReason.NETWORK


async def _fetch(github_adapter: GitHubClientBase, path: str, ref: str) -> bytes:
    try:
        return await github_adapter.get_raw_file_content(path, ref)
    except (RequestFailed, RequestError, RequestTimeout) as exc:
        reason = classify_request_failure(exc)
        raise ContentFetchFailedError(github_adapter.owner, github_adapter.repo_name, ref, path, reason, str(exc)) from exc


async def fetch_source_content(github_adapter: GitHubClientBase, source: SourceRef) -> bytes:
    """Fetch the raw bytes of the mirrored file from the source repository.

    Raises:
        ContentFetchFailedError: If the file is missing, access is denied, or the request fails.
    """
    logger.info("Downloading source file", repo=source.full_name, branch=source.branch, path=source.path)
    try:
        content = await _fetch(github_adapter, source.path, source.branch)
    except ContentFetchFailedError as exc:
        logger.error("Failed to download source file", repo=source.full_name, path=source.path, reason=exc.reason.value, error=str(exc))
        raise
    logger.info("Downloaded source file", repo=source.full_name, path=source.path, size=len(content))
    return content


async def fetch_optional_content(github_adapter: GitHubClientBase, path: str, ref: str) -> bytes | None:
    """Fetch the raw bytes of a file, returning None when it does not exist at ref.

    Used to read the target file from a pull request's head branch, where the
    file is legitimately absent until the first commit lands.
    """
    try:
        return await _fetch(github_adapter, path, ref)
    except ContentFetchFailedError as exc:
        if exc.reason is FetchFailureReason.NOT_FOUND:
            logger.info("File does not exist on branch", path=path, ref=ref)
            return None
        raise
