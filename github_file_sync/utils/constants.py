"""Shared constants used across the application."""

# GitHub API Constants
# --------------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"
"""Default GitHub REST API base URL."""

RAW_CONTENT_MEDIA_TYPE = "application/vnd.github.raw"
"""Media type that makes the contents endpoint return the file bytes instead of a JSON envelope."""

PULL_REQUEST_CREATED_STATUS = 201
"""The only HTTP status that counts as a successful pull request creation."""

# Git Constants
# -------------

DEFAULT_GIT_REMOTE = "origin"
"""Remote used for fetching, pushing and resolving the target repository."""

# Regex Patterns
REMOTE_URL_PATTERN = r"^(?:[A-Za-z][A-Za-z0-9+.-]*://)?(?:[^@/]+@)?(?P<host>[A-Za-z0-9][^/:@]*\.[^/:@]+)(?::\d+(?=/))?[:/](?P<path>[^/].*)$"
"""Pattern splitting a git remote URL into host and repository path.

Matches both URL style (https://github.com/owner/repo.git, ssh://git@host:22/owner/repo)
and scp-like style (git@github.com:owner/repo.git).
"""
