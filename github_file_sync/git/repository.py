"""Thin wrapper around the git executable for the target repository's working tree."""

import subprocess
from pathlib import Path

import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class GitCommandError(Exception):
    """Raised when a git command exits with an unexpected status."""

    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        """Initializes the exception with the failed command and its output."""
        super().__init__(f"Command '{' '.join(command)}' failed with exit code {returncode}: {stderr.strip()}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class GitRepository:
    """A local git working tree, driven through the git command line."""

    def __init__(self, path: Path) -> None:
        """Initialize the repository wrapper for the working tree at path."""
        self.path = path

    @classmethod
    def from_path(cls, path: Path) -> "GitRepository":
        """Create a wrapper for the working tree containing path, rooted at its top level."""
        command = ["git", "rev-parse", "--show-toplevel"]
        try:
            result = subprocess.run(command, cwd=path, capture_output=True, text=True)
        except OSError as exc:
            raise GitCommandError(command, -1, str(exc)) from exc
        if result.returncode != 0:
            raise GitCommandError(command, result.returncode, result.stderr)
        return cls(Path(result.stdout.strip()))

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        command = ["git", "-C", str(self.path), *args]
        logger.debug("Running git command", command=" ".join(command))
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except OSError as exc:
            raise GitCommandError(command, -1, str(exc)) from exc
        if check and result.returncode != 0:
            raise GitCommandError(command, result.returncode, result.stderr)
        return result

    def _run_bytes(self, *args: str) -> bytes:
        command = ["git", "-C", str(self.path), *args]
        logger.debug("Running git command", command=" ".join(command))
        try:
            result = subprocess.run(command, capture_output=True)
        except OSError as exc:
            raise GitCommandError(command, -1, str(exc)) from exc
        if result.returncode != 0:
            raise GitCommandError(command, result.returncode, result.stderr.decode("utf-8", errors="replace"))
        return result.stdout

    # Remote operations
    def get_remote_url(self, remote: str) -> str:
        """Return the configured URL of a remote."""
        return self._run("remote", "get-url", remote).stdout.strip()

    def fetch(self, remote: str, branch: str | None = None) -> None:
        """Fetch all branches of a remote, or a single branch when one is given."""
        if branch is None:
            self._run("fetch", remote)
        else:
            self._run("fetch", remote, branch)

    def remote_branch_exists(self, remote: str, branch: str) -> bool:
        """Check whether the remote has a branch with this name."""
        result = self._run("ls-remote", "--exit-code", "--heads", remote, branch, check=False)
        if result.returncode == 0:
            return True
        # ls-remote exits with 2 when no matching ref was found.
        if result.returncode == 2:
            return False
        raise GitCommandError(["git", "ls-remote", "--exit-code", "--heads", remote, branch], result.returncode, result.stderr)

    def push_upstream(self, remote: str, branch: str) -> None:
        """Push a branch and set it as the upstream of the local branch."""
        self._run("push", "-u", remote, branch)

    # Branch operations
    def local_branch_exists(self, branch: str) -> bool:
        """Check whether a local branch with this name exists."""
        result = self._run("rev-parse", "--verify", "--quiet", f"refs/heads/{branch}", check=False)
        return result.returncode == 0

    def checkout_reset(self, branch: str, start_point: str) -> None:
        """Check out branch, creating it or resetting it to start_point.

        Local modifications to tracked files are discarded.
        """
        self._run("checkout", "--force", "-B", branch, start_point)

    def checkout_new(self, branch: str, start_point: str) -> None:
        """Create and check out a new branch at start_point, discarding local modifications."""
        self._run("checkout", "--force", "-b", branch, start_point)

    def count_commits_between(self, base: str, head: str) -> int:
        """Count the commits reachable from head but not from base."""
        return int(self._run("rev-list", "--count", f"{base}..{head}").stdout.strip())

    def clean(self, relative_path: str) -> None:
        """Remove an untracked file at a path; tracked files are left alone."""
        self._run("clean", "--force", "--quiet", "--", relative_path)

    # Content operations
    def read_worktree_file(self, relative_path: str) -> bytes | None:
        """Read a file from the working tree, or return None when it does not exist."""
        file_path = self.path / relative_path
        if not file_path.is_file():
            return None
        return file_path.read_bytes()

    def write_worktree_file(self, relative_path: str, content: bytes) -> Path:
        """Write content to a file in the working tree, creating parent directories as needed."""
        file_path = self.path / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)
        return file_path

    def read_committed_file(self, ref: str, relative_path: str) -> bytes | None:
        """Read a file as committed at ref, or return None when the path does not exist there."""
        object_name = f"{ref}:{relative_path}"
        if self._run("cat-file", "-e", object_name, check=False).returncode != 0:
            return None
        return self._run_bytes("cat-file", "blob", object_name)

    # Commit operations
    def add(self, relative_path: str) -> None:
        """Stage a path."""
        self._run("add", "--", relative_path)

    def has_staged_changes(self, relative_path: str) -> bool:
        """Check whether the staged copy of a path differs from HEAD."""
        result = self._run("diff", "--cached", "--quiet", "--", relative_path, check=False)
        if result.returncode == 0:
            return False
        if result.returncode == 1:
            return True
        raise GitCommandError(["git", "diff", "--cached", "--quiet", "--", relative_path], result.returncode, result.stderr)

    def commit(self, relative_path: str, message: str, author_name: str, author_email: str) -> None:
        """Commit a single path as the given author, who is also recorded as committer."""
        self._run("-c", f"user.name={author_name}", "-c", f"user.email={author_email}", "commit", "-m", message, "--", relative_path)

    def head_sha(self) -> str:
        """Return the commit SHA of HEAD."""
        return self._run("rev-parse", "HEAD").stdout.strip()
