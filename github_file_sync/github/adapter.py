"""GitHub client adapter for the githubkit library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Literal, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import PullRequest, PullRequestSimple

from github_file_sync.utils.constants import RAW_CONTENT_MEDIA_TYPE

from .abc import GitHubClientBase
from .client import GitHubClient

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def _describe_unprocessable_entity(response: Any) -> tuple[str, list[str]]:
    """Extract GitHub's message and the individual validation errors from a 422 response."""
    try:
        error_data = response.json()
    except ValueError:
        error_data = {}
    message: str = error_data.get("message", "Unprocessable Entity")
    errors = [error.get("message") or error.get("code", "") for error in error_data.get("errors", []) if isinstance(error, dict)]
    return message, errors


def handle_github_422(func: F) -> F:
    """Decorator to handle GitHub 422 Unprocessable Entity errors, logging and raising with details.

    For pull requests this is how GitHub reports, for example, that a pull
    request for the same head already exists or that head and base are equal.
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code != 422:
                raise
            message, errors = _describe_unprocessable_entity(exc.response)
            logger.error("GitHub 422 Unprocessable Entity", function=func.__name__, message=message, errors=errors, status_code=422)
            details = f" ({'; '.join(errors)})" if errors else ""
            raise ValueError(f"GitHub 422 error in {func.__name__}: {message}{details}") from exc

    return wrapper  # type: ignore


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    # Content Operations
    async def get_raw_file_content(self, file_path: str, ref: str) -> bytes:
        """Get the raw bytes of a file at a branch, tag or commit SHA.

        The raw media type makes GitHub return the file itself rather than the
        base64-encoded JSON envelope, so the bytes are returned untouched.
        """
        logger.debug("Fetching raw file content", owner=self.owner, repo=self.repo_name, path=file_path, ref=ref)
        response = await self.client.rest.repos.async_get_content(
            owner=self.owner,
            repo=self.repo_name,
            path=file_path,
            ref=ref,
            headers={"Accept": RAW_CONTENT_MEDIA_TYPE},
        )
        return response.content

    # Pull Request Operations
    async def list_pull_requests(
        self,
        state: Literal["open", "closed", "all"] = "open",
        head: str | None = None,
        base: str | None = None,
        per_page: int = 100,
    ) -> list[PullRequestSimple]:
        """List pull requests, optionally filtered by head and base branch, following every page.

        Args:
            state: Pull request state to filter on.
            head: Head branch qualified with its owner, as 'owner:branch'.
            base: Base branch name.
            per_page: Page size requested from the API.
        """
        filters = self._omit_null_parameters(head=head, base=base)
        matching: list[PullRequestSimple] = []
        page: int = 1
        while True:
            response: Response[list[PullRequestSimple]] = await self.client.rest.pulls.async_list(
                owner=self.owner,
                repo=self.repo_name,
                state=state,
                per_page=per_page,
                page=page,
                **filters,
            )
            batch: list[PullRequestSimple] = response.parsed_data
            matching.extend(batch)
            if len(batch) < per_page:
                break
            page += 1
        logger.debug("Listed pull requests", owner=self.owner, repo=self.repo_name, state=state, count=len(matching), **filters)
        return matching

    @handle_github_422
    async def create_pull_request(self, title: str, head: str, base: str, body: str | None = None, draft: bool | None = None) -> Response[PullRequest]:
        """Open a pull request from head into base.

        The full response is returned so callers can check the HTTP status.
        githubkit serializes title and body into the JSON request body, so they
        are sent exactly as given.
        """
        response: Response[PullRequest] = await self.client.rest.pulls.async_create(
            owner=self.owner,
            repo=self.repo_name,
            **self._omit_null_parameters(title=title, head=head, base=base, body=body, draft=draft),
        )
        logger.info("Created pull request", owner=self.owner, repo=self.repo_name, head=head, base=base, status_code=response.status_code)
        return response
