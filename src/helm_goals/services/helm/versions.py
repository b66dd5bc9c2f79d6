"""Chart version resolution and project versioning.

Chart versions come from, in order: the chart details of a goal, the
version tracked for the push, and the chart descriptor itself.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

import structlog

from helm_goals.core.goals.base import ProjectListener
from helm_goals.services.helm.chart_data import (
    is_helm_project,
    read_chart_data,
    write_chart_version,
)

if TYPE_CHECKING:
    from helm_goals.core.config.models import ChartDetail
    from helm_goals.core.goals.base import GoalEvent, GoalInvocation, ProgressLog, Project

logger = structlog.get_logger()

VERSION_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


class VersionLookup(Protocol):
    """Read access to versions tracked per push."""

    def lookup_version(
        self,
        owner: str,
        repo: str,
        provider_id: str,
        sha: str,
        branch: str,
    ) -> str | None: ...


def lookup_tracked_version(lookup: VersionLookup | None, event: GoalEvent) -> str | None:
    """Look up the version tracked for the push of ``event``."""
    if lookup is None:
        return None
    return lookup.lookup_version(event.owner, event.repo, event.provider_id, event.sha, event.branch)


def determine_chart_version(
    chart_details: ChartDetail,
    invocation: GoalInvocation,
    lookup: VersionLookup | None = None,
) -> str | None:
    """Determine the chart version a goal should use.

    Args:
        chart_details: Chart details; an explicit version wins.
        invocation: Current goal invocation.
        lookup: Tracked version lookup, skipped when None.

    Returns:
        The resolved version, or None when no source provides one. A
        project without a chart descriptor is not an error here.
    """
    if chart_details.version:
        return chart_details.version

    tracked = lookup_tracked_version(lookup, invocation.event)
    if tracked:
        return tracked

    if not is_helm_project(invocation.project):
        logger.debug("chart_version_unresolved", project=str(invocation.project.base_dir))
        return None
    return read_chart_data(invocation.project).version


def change_helm_version(version: str, project: Project, progress_log: ProgressLog) -> None:
    """Rewrite the chart descriptor version in the working tree."""
    progress_log.write(f"Attempting to update local working project to new helm chart version {version}...")
    write_chart_version(project, version)
    progress_log.write("Helm chart version updated.")


def helm_project_versioner(
    event: GoalEvent,
    project: Project,
    progress_log: ProgressLog,
    now: datetime | None = None,
) -> str:
    """Compute and apply a unique pre-release version for a push.

    The version is ``<chart version>-<branch>.<timestamp>`` where slashes
    in the branch become dots and the timestamp is UTC ``yyyymmddHHMMss``.

    Returns:
        The new version.
    """
    chart = read_chart_data(project)
    branch = ".".join(event.branch.split("/"))
    stamp = (now or datetime.now(UTC)).strftime(VERSION_TIMESTAMP_FORMAT)
    version = f"{chart.version}-{branch}.{stamp}"
    change_helm_version(version, project, progress_log)
    return version


def helm_version_project_listener(lookup: VersionLookup) -> ProjectListener:
    """Listener that writes the tracked version into the descriptor before a goal.

    Only applies to helm projects. When no version is tracked for the push
    the descriptor is left alone.
    """

    def listener(project: Project, invocation: GoalInvocation) -> None:
        version = lookup_tracked_version(lookup, invocation.event)
        if not version:
            invocation.progress_log.write("No tracked version for this push, keeping chart version.")
            return
        change_helm_version(version, project, invocation.progress_log)

    return ProjectListener(name="helm version", listener=listener, push_test=is_helm_project)
