"""Contains logic for locating and creating the pull request for the sync branch."""

from typing import Any

import structlog
from githubkit.exception import RequestError, RequestFailed, RequestTimeout

from github_file_sync.configuration.models import PullRequestSpec, TargetRef
from github_file_sync.github.abc import GitHubClientBase
from github_file_sync.synchronize.exceptions import PullRequestCreateError, PullRequestQueryError
from github_file_sync.synchronize.models import PullRequestRef
from github_file_sync.utils.constants import PULL_REQUEST_CREATED_STATUS

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def pull_request_ref_from_github(pull_request: Any) -> PullRequestRef:
    """Build a PullRequestRef from a githubkit pull request model."""
    return PullRequestRef(
        number=pull_request.number,
        head_branch=pull_request.head.ref,
        base_branch=pull_request.base.ref,
        state=pull_request.state,
        html_url=getattr(pull_request, "html_url", None),
    )


async def find_open_pull_request(github_adapter: GitHubClientBase, target: TargetRef) -> PullRequestRef | None:
    """Find the open pull request whose head is the sync branch and whose base is the base branch.

    At most one such pull request is expected. If the service reports several,
    the first one is used and a warning is logged.

    Raises:
        PullRequestQueryError: If the pull request service cannot be queried.
    """
    logger.info("Looking for existing open pull request", head=target.head, base=target.base_branch)
    try:
        pull_requests = await github_adapter.list_pull_requests(state="open", head=target.head, base=target.base_branch)
    except (RequestFailed, RequestError, RequestTimeout) as exc:
        logger.error("Failed to query open pull requests", head=target.head, error=str(exc))
        raise PullRequestQueryError(target.head, str(exc)) from exc

    if not pull_requests:
        logger.info("No open pull request found for sync branch", head=target.head)
        return None
    if len(pull_requests) > 1:
        logger.warning(
            "Multiple open pull requests found for sync branch, using the first one",
            head=target.head,
            pr_numbers=[pr.number for pr in pull_requests],
        )
    pull_request = pull_request_ref_from_github(pull_requests[0])
    logger.info("Found existing open pull request", pr_number=pull_request.number, head=target.head)
    return pull_request


async def create_sync_pull_request(github_adapter: GitHubClientBase, target: TargetRef, spec: PullRequestSpec) -> PullRequestRef:
    """Open a pull request from the sync branch into the base branch.

    Title and body are sent as a JSON payload, so quotes, backslashes and
    control characters reach the service unchanged. Only an HTTP 201 response
    counts as success.

    Raises:
        PullRequestCreateError: If the request fails or the service answers with any other status.
    """
    logger.info("Creating pull request", head=target.sync_branch, base=target.base_branch, title=spec.title)
    try:
        response = await github_adapter.create_pull_request(
            title=spec.title,
            head=target.sync_branch,
            base=target.base_branch,
            body=spec.body,
        )
    except RequestFailed as exc:
        logger.error("Failed to create pull request", status_code=exc.response.status_code, error=str(exc))
        raise PullRequestCreateError(target.sync_branch, target.base_branch, exc.response.status_code, str(exc)) from exc
    except ValueError as exc:
        # Raised by the adapter for 422 Unprocessable Entity responses.
        logger.error("Failed to create pull request", status_code=422, error=str(exc))
        raise PullRequestCreateError(target.sync_branch, target.base_branch, 422, str(exc)) from exc
    except (RequestError, RequestTimeout) as exc:
        logger.error("Failed to create pull request", error=str(exc))
        raise PullRequestCreateError(target.sync_branch, target.base_branch, None, str(exc)) from exc

    if response.status_code != PULL_REQUEST_CREATED_STATUS:
        logger.error("Pull request service did not confirm creation", status_code=response.status_code)
        raise PullRequestCreateError(target.sync_branch, target.base_branch, response.status_code)

    pull_request = pull_request_ref_from_github(response.parsed_data)
    logger.info("PR created", pr_number=pull_request.number, url=pull_request.html_url)
    return pull_request
