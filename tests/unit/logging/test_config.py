"""Unit tests for logging configuration."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from helm_goals.logging.config import (
    RETENTION_DAYS,
    _cleanup_old_logs,
    _setup_file_logging,
    configure_logging,
    get_logger,
    goal_log_context,
)


def _age(path: Path, days: int) -> None:
    old_time = (datetime.now() - timedelta(days=days)).timestamp()
    os.utime(path, (old_time, old_time))


@pytest.mark.unit
class TestCleanupOldLogs:
    """Tests for _cleanup_old_logs function."""

    def test_returns_early_when_log_dir_missing(self, tmp_path: Path) -> None:
        """_cleanup_old_logs should return early if LOG_DIR doesn't exist."""
        with patch("helm_goals.logging.config.LOG_DIR", tmp_path / "nonexistent"):
            _cleanup_old_logs()

    def test_deletes_old_log_files(self, tmp_path: Path) -> None:
        """Rotated logs older than RETENTION_DAYS are removed."""
        log_file = tmp_path / "helm-goals.log.1"
        log_file.write_text("old log data")
        _age(log_file, RETENTION_DAYS + 5)

        with patch("helm_goals.logging.config.LOG_DIR", tmp_path):
            _cleanup_old_logs()

        assert not log_file.exists()

    def test_keeps_recent_log_files(self, tmp_path: Path) -> None:
        """Recent logs are kept."""
        log_file = tmp_path / "helm-goals.log"
        log_file.write_text("recent log data")

        with patch("helm_goals.logging.config.LOG_DIR", tmp_path):
            _cleanup_old_logs()

        assert log_file.exists()

    def test_ignores_unrelated_files(self, tmp_path: Path) -> None:
        """Old files not named like the log file are left alone."""
        other = tmp_path / "versions.yaml"
        other.write_text("versions: []\n")
        _age(other, RETENTION_DAYS + 5)

        with patch("helm_goals.logging.config.LOG_DIR", tmp_path):
            _cleanup_old_logs()

        assert other.exists()

    def test_ignores_os_errors(self, tmp_path: Path) -> None:
        """_cleanup_old_logs should handle OSError gracefully."""
        log_file = tmp_path / "helm-goals.log.1"
        log_file.write_text("data")
        _age(log_file, RETENTION_DAYS + 5)

        with (
            patch("helm_goals.logging.config.LOG_DIR", tmp_path),
            patch.object(Path, "unlink", side_effect=OSError("permission denied")),
        ):
            _cleanup_old_logs()


@pytest.mark.unit
class TestSetupFileLogging:
    """Tests for _setup_file_logging function."""

    def test_creates_log_directory_and_handler(self, tmp_path: Path) -> None:
        """_setup_file_logging should create log dir and add a file handler."""
        log_dir = tmp_path / "logs"
        log_file = log_dir / "helm-goals.log"

        with (
            patch("helm_goals.logging.config.LOG_DIR", log_dir),
            patch("helm_goals.logging.config.LOG_FILE", log_file),
            patch("helm_goals.logging.config._cleanup_old_logs"),
        ):
            root = logging.getLogger()
            initial_count = len(root.handlers)
            _setup_file_logging()
            assert len(root.handlers) == initial_count + 1
            assert isinstance(root.handlers[-1], RotatingFileHandler)
            assert log_dir.exists()
            root.handlers[-1].close()


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            ({"debug": True}, logging.DEBUG),
            ({"verbose": True}, logging.INFO),
            ({}, logging.WARNING),
        ],
    )
    def test_console_handler_level(self, kwargs: dict[str, bool], expected: int) -> None:
        """The console handler level follows the verbosity flags."""
        with patch("helm_goals.logging.config._setup_file_logging"):
            configure_logging(**kwargs)

        assert logging.getLogger().handlers[-1].level == expected

    def test_json_output(self) -> None:
        """configure_logging with json_output=True should not fail."""
        with patch("helm_goals.logging.config._setup_file_logging"):
            configure_logging(json_output=True)

    def test_file_logging_can_be_disabled(self) -> None:
        """log_to_file=False skips the rotating file handler."""
        with patch("helm_goals.logging.config._setup_file_logging") as mock_setup:
            configure_logging(log_to_file=False)

        mock_setup.assert_not_called()

    def test_file_logging_enabled_by_default(self) -> None:
        """The rotating file handler is set up by default."""
        with patch("helm_goals.logging.config._setup_file_logging") as mock_setup:
            configure_logging()

        mock_setup.assert_called_once()


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_bound_logger(self) -> None:
        """get_logger should return a structlog logger."""
        assert get_logger("test") is not None

    def test_binds_initial_context(self) -> None:
        """get_logger should bind initial context when provided."""
        logger = get_logger("test", goal="helm-deploy")
        assert logger is not None


@pytest.mark.unit
class TestGoalLogContext:
    """Tests for goal_log_context."""

    def test_binds_push_fields(self) -> None:
        """Goal and push fields are bound inside the block only."""
        with goal_log_context("helm-package", "acme", "charts", "abc123", "feature/login"):
            bound = structlog.contextvars.get_contextvars()

        assert bound == {
            "goal": "helm-package",
            "repo": "acme/charts",
            "sha": "abc123",
            "branch": "feature/login",
        }
        assert "goal" not in structlog.contextvars.get_contextvars()

    def test_repo_without_owner(self) -> None:
        """A push without an owner logs the bare repository name."""
        with goal_log_context("helm-deploy", "", "charts", "", ""):
            assert structlog.contextvars.get_contextvars()["repo"] == "charts"
