"""Shared helpers for unit tests: a git remote sandbox and in-memory GitHub adapters."""

import subprocess
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Literal
from unittest.mock import MagicMock

from githubkit.exception import RequestFailed

from github_file_sync.github.abc import GitHubClientBase

GIT_IDENTITY = ("-c", "user.name=Test User", "-c", "user.email=test@example.com")


def run_git(cwd: Path, *args: str) -> str:
    """Run a git command with a fixed identity and return its standard output."""
    result = subprocess.run(["git", *GIT_IDENTITY, *args], cwd=cwd, capture_output=True, check=True)
    return result.stdout.decode("utf-8")


def request_failed(status_code: int) -> RequestFailed:
    """Build a githubkit RequestFailed error for the given HTTP status."""
    response = MagicMock()
    response.status_code = status_code
    return RequestFailed(response)


class GitRemoteSandbox:
    """A bare remote, the working clone the tool runs in, and a second clone standing in for other writers."""

    def __init__(self, root: Path, base_branch: str = "main") -> None:
        """Create the remote with a single commit on the base branch and clone it twice."""
        self.root = root
        self.base_branch = base_branch
        self.remote = root / "remote.git"
        self.work = root / "work"
        self.other = root / "other"
        seed = root / "seed"
        seed.mkdir()
        run_git(seed, "init", "--quiet")
        run_git(seed, "symbolic-ref", "HEAD", f"refs/heads/{base_branch}")
        (seed / "README.md").write_text("# Target repository\n")
        run_git(seed, "add", "README.md")
        run_git(seed, "commit", "--quiet", "-m", "Initial commit")
        run_git(root, "clone", "--quiet", "--bare", str(seed), str(self.remote))
        run_git(root, "clone", "--quiet", str(self.remote), str(self.work))
        run_git(root, "clone", "--quiet", str(self.remote), str(self.other))

    def push_file(self, branch: str, path: str, content: bytes, start_point: str | None = None, message: str = "Update file") -> None:
        """Commit content at path on branch from the other clone and push it to the remote."""
        run_git(self.other, "fetch", "--quiet", "origin")
        run_git(self.other, "checkout", "--quiet", "--force", "-B", branch, f"origin/{start_point or branch}")
        file_path = self.other / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)
        run_git(self.other, "add", path)
        run_git(self.other, "commit", "--quiet", "-m", message)
        run_git(self.other, "push", "--quiet", "origin", branch)

    def _remote_git(self, *args: str) -> subprocess.CompletedProcess[bytes]:
        return subprocess.run(["git", f"--git-dir={self.remote}", *args], capture_output=True)

    def read_file(self, branch: str, path: str) -> bytes | None:
        """Read a file as committed on a remote branch, or None if it does not exist there."""
        if self._remote_git("cat-file", "-e", f"{branch}:{path}").returncode != 0:
            return None
        return self._remote_git("cat-file", "blob", f"{branch}:{path}").stdout

    def branch_exists(self, branch: str) -> bool:
        """Check whether the remote has a branch."""
        return self._remote_git("rev-parse", "--verify", "--quiet", f"refs/heads/{branch}").returncode == 0

    def commit_count(self, branch: str) -> int:
        """Count the commits reachable from a remote branch."""
        return int(self._remote_git("rev-list", "--count", branch).stdout.decode("utf-8").strip())


class FakeSourceAdapter(GitHubClientBase):
    """In-memory content store for the source repository."""

    def __init__(self, owner: str, repo_name: str, files: dict[tuple[str, str], bytes] | None = None) -> None:
        """Initialize the store with files keyed by (path, ref)."""
        self.owner = owner
        self.repo_name = repo_name
        self.files = files or {}
        self.requests: list[tuple[str, str]] = []

    async def get_raw_file_content(self, file_path: str, ref: str) -> bytes:
        """Return the stored bytes, or raise a 404 like the contents API."""
        self.requests.append((file_path, ref))
        if (file_path, ref) not in self.files:
            raise request_failed(404)
        return self.files[(file_path, ref)]

    async def list_pull_requests(
        self, state: Literal["open", "closed", "all"] = "open", head: str | None = None, base: str | None = None, per_page: int = 100
    ) -> list[Any]:
        """The source repository's pull requests are never consulted."""
        raise AssertionError("list_pull_requests must not be called on the source repository")

    async def create_pull_request(self, title: str, head: str, base: str, body: str | None = None, draft: bool | None = None) -> Any:
        """The source repository is never written to."""
        raise AssertionError("create_pull_request must not be called on the source repository")


class FakeTargetAdapter(GitHubClientBase):
    """Pull request service and content store for the target repository, backed by a sandbox remote."""

    def __init__(self, owner: str, repo_name: str, sandbox: GitRemoteSandbox, create_status: int = 201) -> None:
        """Initialize the fake with no pull requests."""
        self.owner = owner
        self.repo_name = repo_name
        self.sandbox = sandbox
        self.create_status = create_status
        self.pull_requests: list[SimpleNamespace] = []
        self.created_payloads: list[dict[str, Any]] = []

    def add_pull_request(self, head_branch: str, base_branch: str, state: str = "open") -> SimpleNamespace:
        """Register an existing pull request."""
        pull_request = SimpleNamespace(
            number=len(self.pull_requests) + 1,
            head=SimpleNamespace(ref=head_branch, label=f"{self.owner}:{head_branch}"),
            base=SimpleNamespace(ref=base_branch),
            state=state,
            html_url=f"https://github.com/{self.owner}/{self.repo_name}/pull/{len(self.pull_requests) + 1}",
        )
        self.pull_requests.append(pull_request)
        return pull_request

    @property
    def open_pull_requests(self) -> list[SimpleNamespace]:
        """Return the pull requests that are still open."""
        return [pr for pr in self.pull_requests if pr.state == "open"]

    async def get_raw_file_content(self, file_path: str, ref: str) -> bytes:
        """Read the file from the sandbox remote, or raise a 404."""
        content = self.sandbox.read_file(ref, file_path)
        if content is None:
            raise request_failed(404)
        return content

    async def list_pull_requests(
        self, state: Literal["open", "closed", "all"] = "open", head: str | None = None, base: str | None = None, per_page: int = 100
    ) -> list[Any]:
        """Filter pull requests by state, head and base like the pulls API."""
        matches = [pr for pr in self.pull_requests if state == "all" or pr.state == state]
        if head is not None:
            matches = [pr for pr in matches if pr.head.label == head]
        if base is not None:
            matches = [pr for pr in matches if pr.base.ref == base]
        return matches

    async def create_pull_request(self, title: str, head: str, base: str, body: str | None = None, draft: bool | None = None) -> Any:
        """Record the payload and answer with the configured status."""
        self.created_payloads.append({"title": title, "head": head, "base": base, "body": body})
        if self.create_status != 201:
            return SimpleNamespace(status_code=self.create_status, parsed_data=None)
        pull_request = self.add_pull_request(head, base)
        return SimpleNamespace(status_code=201, parsed_data=pull_request)
