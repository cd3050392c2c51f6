"""Shared test fixtures for GitHub client tests."""

from typing import Any

import pytest

from pr_tracker.github.client import GitHubClient


@pytest.fixture
def github_client() -> GitHubClient:
    """GitHub client for NixOS/nixpkgs with a test token."""
    return GitHubClient("test_token_12345", "NixOS/nixpkgs")


@pytest.fixture
def sample_pull_payload() -> dict[str, Any]:
    """Trimmed GitHub REST response for a merged pull request."""
    return {
        "number": 123456,
        "title": "hello: 2.12 -> 2.12.1",
        "state": "closed",
        "merged": True,
        "merge_commit_sha": "0123456789abcdef0123456789abcdef01234567",
        "base": {"ref": "staging"},
        "head": {"ref": "hello-update"},
    }
