"""Fixtures for unit tests."""

from pathlib import Path
from typing import Generator

import pytest
import structlog

from github_file_sync.configuration.models import (
    CommitIdentity,
    GitHubAuthenticationType,
    PullRequestSpec,
    SourceRef,
    SyncConfig,
    TargetSettings,
)
from github_file_sync.git.repository import GitRepository
from tests.unit.utils import GitRemoteSandbox


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def sandbox(tmp_path: Path) -> GitRemoteSandbox:
    """A bare remote repository with a working clone."""
    return GitRemoteSandbox(tmp_path)


@pytest.fixture
def repository(sandbox: GitRemoteSandbox, monkeypatch: pytest.MonkeyPatch) -> GitRepository:
    """The working clone, reporting a GitHub remote URL so the target repository can be resolved."""
    git_repository = GitRepository.from_path(sandbox.work)
    monkeypatch.setattr(git_repository, "get_remote_url", lambda remote: "git@github.com:acme/widgets.git")
    return git_repository


@pytest.fixture
def sync_config(sandbox: GitRemoteSandbox) -> SyncConfig:
    """Run configuration mirroring upstream/templates:config/settings.toml into vendor/settings.toml."""
    return SyncConfig(
        source=SourceRef(owner="upstream", repo="templates", branch="main", path="config/settings.toml"),
        target=TargetSettings(path="vendor/settings.toml", base_branch="main", sync_branch="sync/settings"),
        commit=CommitIdentity(author_name="Sync Bot", author_email="sync-bot@example.com", message="Sync settings.toml from upstream"),
        pull_request=PullRequestSpec(title='Sync "settings.toml"', body="Automated sync of C:\\config\\settings.toml"),
        github_api_url="https://api.github.com",
        github_auth_type=GitHubAuthenticationType.ANONYMOUS,
        github_token=None,
        repo_path=sandbox.work,
    )
