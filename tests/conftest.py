"""Shared pytest fixtures for helm_goals tests."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from helm_goals.cli.main import app
from helm_goals.core.goals.base import GoalEvent, GoalInvocation, ProgressLog, Project

CHART_YAML = """\
apiVersion: v1
name: mychart
description: A Helm chart for testing
version: 1.2.0
appVersion: "2.0"
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Reset environment variables and keep log files out of the home directory."""
    # Clear any HELM_GOALS_ prefixed environment variables
    for key in list(os.environ.keys()):
        if key.startswith("HELM_GOALS_"):
            monkeypatch.delenv(key, raising=False)

    log_dir = tmp_path / "logs"
    monkeypatch.setattr("helm_goals.logging.config.LOG_DIR", log_dir)
    monkeypatch.setattr("helm_goals.logging.config.LOG_FILE", log_dir / "helm-goals.log")


@pytest.fixture
def chart_project(temp_dir: Path) -> Path:
    """Create a project working tree holding a minimal chart."""
    (temp_dir / "templates").mkdir()
    (temp_dir / "templates" / "deployment.yaml").write_text("kind: Deployment\n")
    (temp_dir / "Chart.yaml").write_text(CHART_YAML)
    (temp_dir / "values.yaml").write_text("replicaCount: 1\n")
    return temp_dir


@pytest.fixture
def goal_event() -> GoalEvent:
    """Provide the push a goal runs for."""
    return GoalEvent(
        owner="acme",
        repo="charts",
        provider_id="github",
        sha="abc123",
        branch="feature/login",
    )


@pytest.fixture
def invocation(chart_project: Path, goal_event: GoalEvent) -> GoalInvocation:
    """Provide a goal invocation for the chart project."""
    return GoalInvocation(
        project=Project(chart_project),
        event=goal_event,
        progress_log=ProgressLog("test"),
    )


@pytest.fixture(autouse=True)
def reset_root_logger() -> Generator[None]:
    """Remove handlers added by configure_logging after each test."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers
