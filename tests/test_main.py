"""Tests for application startup and shutdown."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

import pr_tracker.main
from pr_tracker.core.config import Settings
from pr_tracker.main import fetch_loop, shutdown, startup
from pr_tracker.nixpkgs.repository import NixpkgsRepository
from pr_tracker.shared.exceptions import RepositoryError


@pytest.mark.asyncio
async def test_startup_and_shutdown(mock_settings: Settings) -> None:
    """Test startup wires the server to the configured repository."""
    mock_settings.port = 0

    with (
        patch("pr_tracker.main.get_settings", return_value=mock_settings),
        patch.object(NixpkgsRepository, "fetch", new_callable=AsyncMock),
    ):
        await startup()

        server = pr_tracker.main.tracker_server
        client = pr_tracker.main.github_client
        task = pr_tracker.main.fetch_task
        try:
            assert server is not None and server.is_running
            assert client is not None and client.repo == "NixOS/nixpkgs"
            assert str(server.oracle.path) == mock_settings.nixpkgs_path
            assert task is not None and not task.done()
        finally:
            await shutdown()

    assert pr_tracker.main.tracker_server is None
    assert pr_tracker.main.github_client is None
    assert pr_tracker.main.fetch_task is None
    assert task.cancelled()
    assert client.session is not None and client.session.closed


@pytest.mark.asyncio
async def test_fetch_loop_survives_failed_fetch() -> None:
    """Test a failed fetch is logged and retried after the interval."""
    repository = NixpkgsRepository("/nonexistent")
    repository.fetch = AsyncMock(side_effect=RepositoryError("git fetch origin exited with 128"))  # type: ignore[method-assign]

    sleep = AsyncMock(side_effect=[None, asyncio.CancelledError()])
    with patch("pr_tracker.main.asyncio.sleep", sleep):
        with pytest.raises(asyncio.CancelledError):
            await fetch_loop(repository, interval_minutes=5)

    assert repository.fetch.await_count == 2
    sleep.assert_awaited_with(300)


def test_run_reports_config_errors(capsys: pytest.CaptureFixture[str]) -> None:
    """Test a configuration error exits with status 1."""
    from pr_tracker.shared.exceptions import ConfigError

    with patch("pr_tracker.main.get_settings", side_effect=ConfigError("Invalid log level: LOUD")):
        with pytest.raises(SystemExit) as exc_info:
            pr_tracker.main.run()

    assert exc_info.value.code == 1
    assert "Configuration error: Invalid log level: LOUD" in capsys.readouterr().err
