"""Tests for main CLI module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from helm_goals.cli.main import app


class TestCLIMain:
    """Test main CLI entry point."""

    @pytest.mark.unit
    def test_help_option(self, cli_runner: CliRunner) -> None:
        """Test --help option displays help text."""
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Package Helm charts" in result.stdout

    @pytest.mark.unit
    def test_version_option(self, cli_runner: CliRunner) -> None:
        """Test --version option displays version."""
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "helm-goals version" in result.stdout

    @pytest.mark.unit
    def test_verbose_flag(self, cli_runner: CliRunner) -> None:
        """Test --verbose flag is accepted."""
        result = cli_runner.invoke(app, ["--verbose", "--help"])
        assert result.exit_code == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("command", ["detect", "version", "package", "deploy"])
    def test_commands_registered(self, cli_runner: CliRunner, command: str) -> None:
        """Every goal command is available."""
        result = cli_runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0

    @pytest.mark.unit
    def test_invalid_config_file(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        """An invalid config file is reported and fails."""
        config = temp_dir / "config.yaml"
        config.write_text("helm:\n  binary: helm3\n")

        result = cli_runner.invoke(app, ["--config", str(config), "detect", "--project", str(temp_dir)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.stdout

    @pytest.mark.unit
    def test_file_logging_on_by_default(self, cli_runner: CliRunner, chart_project: Path) -> None:
        """The rotating log file is enabled unless switched off."""
        with patch("helm_goals.cli.main.configure_logging") as mock_configure:
            result = cli_runner.invoke(app, ["detect", "--project", str(chart_project)])

        assert result.exit_code == 0
        mock_configure.assert_called_once_with(
            verbose=False, debug=False, json_output=False, log_to_file=True
        )

    @pytest.mark.unit
    def test_no_log_file(self, cli_runner: CliRunner, chart_project: Path) -> None:
        """--no-log-file keeps logs on the console only."""
        with patch("helm_goals.cli.main.configure_logging") as mock_configure:
            result = cli_runner.invoke(app, ["--no-log-file", "detect", "--project", str(chart_project)])

        assert result.exit_code == 0
        assert mock_configure.call_args.kwargs["log_to_file"] is False
