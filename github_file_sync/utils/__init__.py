"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_GIT_REMOTE,
    DEFAULT_GITHUB_API_URL,
    PULL_REQUEST_CREATED_STATUS,
    RAW_CONTENT_MEDIA_TYPE,
)
from .github import RepositoryIdentity, parse_remote_url

__all__ = [
    "DEFAULT_GIT_REMOTE",
    "DEFAULT_GITHUB_API_URL",
    "PULL_REQUEST_CREATED_STATUS",
    "RAW_CONTENT_MEDIA_TYPE",
    "RepositoryIdentity",
    "parse_remote_url",
]
