"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False
    CONFIG_FILE: Path | None = None

    # GitHub credential settings. GH_TOKEN takes precedence over GITHUB_PAT_TOKEN.
    GH_TOKEN: str | None = None
    GITHUB_PAT_TOKEN: str | None = None

    @property
    def github_token(self) -> str | None:
        """Return the configured GitHub credential, or None for anonymous access."""
        return self.GH_TOKEN or self.GITHUB_PAT_TOKEN or None
