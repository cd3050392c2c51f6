"""Tests for pr_tracker.core.logging module."""

import json

import pytest

from pr_tracker.core.logging import (
    get_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)


def test_logger_outputs_json(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that logger outputs valid JSON with expected fields."""
    setup_logging(log_level="INFO")
    logger = get_logger("test")

    logger.info("tree.build.started", base_branch="master")

    log_data = json.loads(capsys.readouterr().out.strip())

    assert log_data["event"] == "tree.build.started"
    assert log_data["base_branch"] == "master"
    assert log_data["service"] == "pr-tracker"
    assert log_data["level"] == "info"
    assert "timestamp" in log_data


def test_logger_filters_below_level(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(log_level="WARNING")
    logger = get_logger("test")

    logger.info("tree.build.started")

    assert capsys.readouterr().out == ""


def test_logger_includes_correlation_id(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that correlation ID is included in log output when set."""
    setup_logging(log_level="INFO")
    logger = get_logger("test")

    set_correlation_id("req-123")
    try:
        logger.info("web.request.started")
    finally:
        set_correlation_id("")

    log_data = json.loads(capsys.readouterr().out.strip())

    assert log_data["correlation_id"] == "req-123"


def test_correlation_id_get_set() -> None:
    set_correlation_id("req-456")
    try:
        assert get_correlation_id() == "req-456"
    finally:
        set_correlation_id("")


def test_console_output(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that non-JSON output is human readable."""
    setup_logging(log_level="INFO", json_output=False)
    logger = get_logger("test")

    logger.warning("tree.ancestry.failed", commit="abc123")

    out = capsys.readouterr().out
    assert "tree.ancestry.failed" in out
    assert "commit=abc123" in out
    setup_logging(log_level="INFO")


def test_logger_exception_info(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that exc_info=True includes exception traceback in JSON."""
    setup_logging(log_level="INFO")
    logger = get_logger("test")

    try:
        raise ValueError("Test exception")
    except ValueError:
        logger.error("application.error.fatal", exc_info=True)

    log_data = json.loads(capsys.readouterr().out.strip())

    assert "ValueError" in log_data["exception"]
    assert "Test exception" in log_data["exception"]
