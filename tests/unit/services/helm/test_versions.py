"""Unit tests for chart version resolution and project versioning."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

from helm_goals.core.config.models import ChartDetail
from helm_goals.core.goals.base import GoalEvent, GoalInvocation, ProgressLog, Project
from helm_goals.integrations.helm.exceptions import ChartNotFoundError
from helm_goals.services.helm.chart_data import read_chart_data
from helm_goals.services.helm.versions import (
    determine_chart_version,
    helm_project_versioner,
    helm_version_project_listener,
    lookup_tracked_version,
)

FIXED_NOW = datetime(2024, 3, 5, 14, 7, 9, tzinfo=UTC)


def _lookup(version: str | None) -> MagicMock:
    lookup = MagicMock()
    lookup.lookup_version.return_value = version
    return lookup


# ===========================================================================
# determine_chart_version
# ===========================================================================


@pytest.mark.unit
class TestDetermineChartVersion:
    """Tests for determine_chart_version."""

    def test_explicit_version_wins(self, invocation: GoalInvocation) -> None:
        """An explicit chart version beats a tracked one."""
        lookup = _lookup("9.9.9")

        version = determine_chart_version(ChartDetail(name="app", version="1.2.3"), invocation, lookup)

        assert version == "1.2.3"
        lookup.lookup_version.assert_not_called()

    def test_tracked_version_beats_descriptor(self, invocation: GoalInvocation) -> None:
        """A tracked version beats the descriptor version."""
        lookup = _lookup("9.9.9")

        version = determine_chart_version(ChartDetail(name="app"), invocation, lookup)

        assert version == "9.9.9"
        lookup.lookup_version.assert_called_once_with(
            "acme", "charts", "github", "abc123", "feature/login"
        )

    def test_falls_back_to_descriptor(self, invocation: GoalInvocation) -> None:
        """Without explicit or tracked versions the descriptor is used."""
        version = determine_chart_version(ChartDetail(name="app"), invocation, _lookup(None))

        assert version == "1.2.0"

    def test_no_lookup(self, invocation: GoalInvocation) -> None:
        """The tracked lookup is optional."""
        assert determine_chart_version(ChartDetail(name="app"), invocation) == "1.2.0"

    def test_descriptor_without_version(self, tmp_path: Path, goal_event: GoalEvent) -> None:
        """No version from any source gives None."""
        (tmp_path / "Chart.yaml").write_text("name: app\n")
        invocation = GoalInvocation(project=Project(tmp_path), event=goal_event)

        assert determine_chart_version(ChartDetail(name="app"), invocation) is None

    def test_project_without_descriptor(self, tmp_path: Path, goal_event: GoalEvent) -> None:
        """A project with no Chart.yaml resolves to None instead of failing."""
        invocation = GoalInvocation(project=Project(tmp_path), event=goal_event)

        version = determine_chart_version(
            ChartDetail(name="app", registry="myrepo"), invocation, _lookup(None)
        )

        assert version is None

    def test_lookup_tracked_version_without_lookup(self, goal_event: GoalEvent) -> None:
        """No lookup means nothing is tracked."""
        assert lookup_tracked_version(None, goal_event) is None


# ===========================================================================
# helm_project_versioner
# ===========================================================================


@pytest.mark.unit
class TestHelmProjectVersioner:
    """Tests for helm_project_versioner."""

    def test_version_format(self, chart_project: Path, goal_event: GoalEvent) -> None:
        """Version is chart version, branch with dots, then UTC timestamp."""
        project = Project(chart_project)
        progress = ProgressLog()

        version = helm_project_versioner(goal_event, project, progress, now=FIXED_NOW)

        assert version == "1.2.0-feature.login.20240305140709"
        assert read_chart_data(project).version == version
        assert progress.lines[-1] == "Helm chart version updated."

    def test_keeps_other_descriptor_keys(self, chart_project: Path, goal_event: GoalEvent) -> None:
        """Only the version key is rewritten."""
        helm_project_versioner(goal_event, Project(chart_project), ProgressLog(), now=FIXED_NOW)

        data = yaml.safe_load((chart_project / "Chart.yaml").read_text())
        assert data["appVersion"] == "2.0"
        assert data["description"] == "A Helm chart for testing"

    def test_not_a_helm_project(self, tmp_path: Path, goal_event: GoalEvent) -> None:
        """Projects without a chart cannot be versioned."""
        with pytest.raises(ChartNotFoundError):
            helm_project_versioner(goal_event, Project(tmp_path), ProgressLog())


# ===========================================================================
# helm_version_project_listener
# ===========================================================================


@pytest.mark.unit
class TestHelmVersionProjectListener:
    """Tests for helm_version_project_listener."""

    def test_applies_tracked_version(self, invocation: GoalInvocation) -> None:
        """The tracked version is written into the descriptor."""
        listener = helm_version_project_listener(_lookup("1.2.0-main.1"))

        listener.listener(invocation.project, invocation)

        assert read_chart_data(invocation.project).version == "1.2.0-main.1"

    def test_keeps_version_when_untracked(self, invocation: GoalInvocation) -> None:
        """Nothing tracked leaves the descriptor alone."""
        listener = helm_version_project_listener(_lookup(None))

        listener.listener(invocation.project, invocation)

        assert read_chart_data(invocation.project).version == "1.2.0"
        assert "No tracked version" in invocation.progress_log.lines[-1]

    def test_push_test_is_helm_project(self, tmp_path: Path, chart_project: Path) -> None:
        """The listener only applies to helm projects."""
        listener = helm_version_project_listener(_lookup(None))

        assert listener.name == "helm version"
        assert listener.push_test is not None
        assert listener.push_test(Project(chart_project)) is True
        assert listener.push_test(Project(tmp_path)) is False
