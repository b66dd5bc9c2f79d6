"""Chart descriptor (Chart.yaml) access within a project tree."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from helm_goals.integrations.helm.exceptions import ChartNotFoundError

if TYPE_CHECKING:
    from helm_goals.core.goals.base import Project

logger = structlog.get_logger()

CHART_FILE_PATTERN = re.compile(r"chart\.ya?ml", re.IGNORECASE)


@dataclass(frozen=True)
class ChartData:
    """Name and version read from a chart descriptor."""

    name: str
    version: str | None
    path: Path


def find_chart_files(project: Project) -> list[Path]:
    """All chart descriptors in the project, shallowest first."""
    return project.find_files(CHART_FILE_PATTERN)


def is_helm_project(project: Project) -> bool:
    """Whether the project contains a chart descriptor anywhere."""
    return bool(find_chart_files(project))


def _round_trip_yaml() -> Any:
    """YAML handler that keeps comments, key order and quoting on rewrite."""
    from ruamel.yaml import YAML

    handler = YAML()
    handler.preserve_quotes = True
    return handler


def _load_descriptor(path: Path) -> dict[str, Any]:
    from ruamel.yaml.error import YAMLError

    try:
        data = _round_trip_yaml().load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise ChartNotFoundError(f"Chart descriptor {path} is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ChartNotFoundError(f"Chart descriptor {path} is not a YAML mapping")
    return data


def read_chart_data(project: Project) -> ChartData:
    """Read the chart name and version.

    When several descriptors exist the shallowest one wins.

    Args:
        project: Project to search.

    Returns:
        Chart name, version and descriptor path.

    Raises:
        ChartNotFoundError: If no descriptor exists or it has no name.
    """
    chart_files = find_chart_files(project)
    if not chart_files:
        raise ChartNotFoundError(base_dir=str(project.base_dir))

    path = chart_files[0]
    data = _load_descriptor(path)
    name = data.get("name")
    if not name:
        raise ChartNotFoundError(f"Chart descriptor {path} has no name")

    version = data.get("version")
    chart = ChartData(
        name=str(name),
        version=str(version) if version is not None else None,
        path=path,
    )
    logger.debug("chart_data_read", path=str(path), name=chart.name, version=chart.version)
    return chart


def write_chart_version(project: Project, version: str) -> list[Path]:
    """Set the version field of every chart descriptor in the project.

    Comments, quoting and all other keys are written back unchanged.

    Args:
        project: Project to update.
        version: New chart version.

    Returns:
        Paths of the descriptors that were rewritten.

    Raises:
        ChartNotFoundError: If no descriptor exists.
    """
    chart_files = find_chart_files(project)
    if not chart_files:
        raise ChartNotFoundError(base_dir=str(project.base_dir))

    writer = _round_trip_yaml()
    for path in chart_files:
        data = _load_descriptor(path)
        data["version"] = version
        with path.open("w", encoding="utf-8") as f:
            writer.dump(data, f)
        logger.info("chart_version_written", path=str(path), version=version)

    return chart_files
