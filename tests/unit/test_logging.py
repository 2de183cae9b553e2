"""Tests for logging configuration."""

import structlog

from openinterviewer.core.logging import (
    LOG_FILE_PREFIX,
    MAX_VALUE_LENGTH,
    bind_context,
    clip_long_values,
    clear_context,
    configure_logging,
    redact_secrets,
)


def test_configure_logging_creates_run_file(tmp_path):
    logs_dir = tmp_path / "logs"

    configure_logging(logs_dir=logs_dir)

    files = list(logs_dir.glob(f"{LOG_FILE_PREFIX}*.log"))
    assert len(files) == 1


def test_old_run_logs_are_culled(tmp_path):
    logs_dir = tmp_path / "logs"
    logs_dir.mkdir()
    for i in range(6):
        (logs_dir / f"{LOG_FILE_PREFIX}2020010{i}_000000.log").write_text("old")

    configure_logging(log_runs_to_keep=3, logs_dir=logs_dir)

    assert len(list(logs_dir.glob(f"{LOG_FILE_PREFIX}*.log"))) == 3


def test_bind_and_clear_context():
    clear_context()
    bind_context(request_id="req-1", session_id="s-1")

    assert structlog.contextvars.get_contextvars() == {
        "request_id": "req-1",
        "session_id": "s-1",
    }

    clear_context()
    assert structlog.contextvars.get_contextvars() == {}


def test_api_keys_are_redacted():
    event = redact_secrets(None, "info", {"event": "x", "anthropic_api_key": "sk-123"})

    assert event["anthropic_api_key"] == "***"


def test_long_values_are_clipped():
    event = clip_long_values(None, "info", {"event": "x", "raw": "a" * 600})

    assert event["raw"].startswith("a" * MAX_VALUE_LENGTH)
    assert event["raw"].endswith("...(+100)")
