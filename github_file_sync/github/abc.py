"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from typing import Any, Literal


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients bound to a single repository.

    One adapter serves both roles of a run: the source repository only has
    file content read from it, the target repository is also searched for and
    given pull requests.
    """

    owner: str
    repo_name: str

    # Content Operations
    @abstractmethod
    async def get_raw_file_content(self, file_path: str, ref: str) -> bytes:
        """Get the raw bytes of a file at a branch, tag or commit SHA."""
        pass

    # Pull Request Operations
    @abstractmethod
    async def list_pull_requests(
        self,
        state: Literal["open", "closed", "all"] = "open",
        head: str | None = None,
        base: str | None = None,
        per_page: int = 100,
    ) -> list[Any]:
        """List pull requests, optionally filtered by head and base branch."""
        pass

    @abstractmethod
    async def create_pull_request(self, title: str, head: str, base: str, body: str | None = None, draft: bool | None = None) -> Any:
        """Open a pull request and return the service's response."""
        pass
