"""Shared pytest fixtures for PR Tracker tests."""

from pathlib import Path

import pytest

from pr_tracker.core.config import Settings


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Settings instance with test values.

    Args:
        tmp_path: pytest's temporary directory fixture
    """
    return Settings(
        github_token="test_github_token",
        github_repo="NixOS/nixpkgs",
        nixpkgs_path=str(tmp_path / "nixpkgs"),
        host="127.0.0.1",
        port=8000,
        log_level="INFO",
        environment="test",
    )


@pytest.fixture(autouse=True)
def reset_settings_cache() -> None:
    """Reset the global settings cache before and after each test.

    This ensures tests don't interfere with each other via cached settings.
    """
    import pr_tracker.core.config

    pr_tracker.core.config._settings = None

    yield

    pr_tracker.core.config._settings = None
