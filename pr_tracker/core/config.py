"""Configuration management using Pydantic Settings."""

from typing import ClassVar

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pr_tracker.shared.exceptions import ConfigError

# Singleton instance
_settings: "Settings | None" = None


class Settings(BaseSettings):
    """Tracker settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # GitHub configuration
    github_token: str
    github_repo: str = "NixOS/nixpkgs"

    # Local nixpkgs checkout used to answer branch ancestry
    nixpkgs_path: str = "data/nixpkgs"
    nixpkgs_remote: str = "origin"
    nixpkgs_fetch_interval_minutes: int = 5

    # HTTP front end
    host: str = "127.0.0.1"
    port: int = 8000

    # Application settings
    log_level: str = "INFO"
    log_json: bool = True
    environment: str = "development"

    VALID_LOG_LEVELS: ClassVar[set[str]] = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        v_upper = v.upper()
        if v_upper not in cls.VALID_LOG_LEVELS:
            raise ConfigError(
                f"Invalid log level: {v}. Must be one of {', '.join(sorted(cls.VALID_LOG_LEVELS))}"
            )
        return v_upper

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate the listen port is a usable TCP port."""
        if not 1 <= v <= 65535:
            raise ConfigError(f"Port must be between 1 and 65535, got {v}")
        return v

    @field_validator("nixpkgs_fetch_interval_minutes")
    @classmethod
    def validate_fetch_interval(cls, v: int) -> int:
        """Validate nixpkgs fetch interval (1-1440 minutes / 24 hours)."""
        if not 1 <= v <= 1440:
            raise ConfigError(f"Fetch interval must be 1-1440 minutes, got {v}")
        return v

    @field_validator("github_repo")
    @classmethod
    def validate_github_repo(cls, v: str) -> str:
        """Validate the repository is given as owner/name."""
        owner, _, name = v.partition("/")
        if not owner or not name or "/" in name:
            raise ConfigError(f"GitHub repository must look like 'owner/name', got {v!r}")
        return v


def get_settings() -> Settings:
    """Get or create the global Settings instance (cached singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()  # type: ignore[call-arg]
    return _settings
