"""Configuration management using Pydantic Settings.

All configuration values are loaded from environment variables.
Never hardcode sensitive values like the GitHub token.
"""

from enum import Enum
from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


DEFAULT_PRIORITY_GLYPHS: dict[str, str] = {
    "low": "\U0001f7e2",  # green circle
    "medium": "\U0001f7e1",  # yellow circle
    "high": "\U0001f7e0",  # orange circle
    "critical": "\U0001f534",  # red circle
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are loaded from environment variables or .env file.
    GITHUB_TOKEN and GITHUB_REPO may be unset: the service still starts,
    and every submission fails at the outbound call with a 500.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Settings
    APP_NAME: str = Field(default="BugRelay", description="Application name")
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/staging/production)",
    )
    DEBUG: bool = Field(default=False, description="Expose exception details in error responses")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Issue Tracker Settings
    ISSUE_TRACKER: Literal["github", "mock"] = Field(
        default="github",
        description="Issue tracker backend (mock keeps issues in memory)",
    )
    GITHUB_TOKEN: str | None = Field(
        default=None,
        description="GitHub token with write access to GITHUB_REPO",
    )
    GITHUB_REPO: str | None = Field(
        default=None,
        description="Target repository identifier (owner/name)",
    )
    GITHUB_API_URL: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL",
    )

    # Report Formatting
    REPORT_SOURCE: str = Field(
        default="InSync",
        description="Name of the form shown in the issue body footer",
    )
    PRIORITY_GLYPHS: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PRIORITY_GLYPHS),
        description="Priority to glyph lookup used in the issue body",
    )
    DEFAULT_PRIORITY_GLYPH: str = Field(
        default="⚪",
        description="Glyph used for missing or unrecognized priorities",
    )

    @field_validator("GITHUB_TOKEN", "GITHUB_REPO", mode="before")
    @classmethod
    def blank_as_none(cls, v: Any) -> Any:
        """Treat empty strings from the environment as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("GITHUB_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the API base URL so paths can be appended."""
        return v.rstrip("/")

    @property
    def github_configured(self) -> bool:
        """Check whether both GitHub credential and repository are set."""
        return bool(self.GITHUB_TOKEN and self.GITHUB_REPO)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
