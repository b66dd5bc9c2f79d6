"""Chart build directory assembly.

``helm package`` requires the chart directory to be named after the
chart. The package goal therefore copies only the chart's own files into
``<project>/<chart name>`` so nothing else in the repository leaks into
the archive.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from helm_goals.integrations.helm.exceptions import ChartBuildError

if TYPE_CHECKING:
    from helm_goals.core.goals.base import ProgressLog, Project

logger = structlog.get_logger()

REQUIRED_DIRS = ("templates",)
REQUIRED_FILES = ("Chart.yaml", "values.yaml")
OPTIONAL_FILES = ("README.md", "requirements.yaml", "requirements.lock", ".helmignore")
OPTIONAL_DIRS = ("ci",)


def _copy(source: Path, target: Path, *, directory: bool) -> None:
    try:
        if directory:
            shutil.copytree(source, target)
        else:
            shutil.copyfile(source, target)
    except OSError as e:
        raise ChartBuildError(
            message=f"Failed to copy {source} to chart build directory: {e}",
            path=str(source),
            original_error=e,
        ) from e


def create_chart_build_dir(
    chart_name: str,
    project: Project,
    source: str | None = None,
    progress_log: ProgressLog | None = None,
) -> Path:
    """Create the chart build directory and copy the chart files into it.

    Args:
        chart_name: Chart name; becomes the directory name.
        project: Project holding the chart sources.
        source: Chart source path relative to the project root.
        progress_log: Optional progress log for the goal.

    Returns:
        Path of the build directory.

    Raises:
        ChartBuildError: If the directory cannot be created (including when
            it already exists) or a required file is missing.
    """
    source_dir = project.path(source) if source else project.base_dir
    build_dir = project.path(chart_name)
    log = logger.bind(chart=chart_name, source=str(source_dir))

    try:
        build_dir.mkdir()
    except OSError as e:
        raise ChartBuildError(
            message=f"Failed to create chart build directory {build_dir}: {e}",
            path=str(build_dir),
            original_error=e,
        ) from e

    if progress_log:
        progress_log.write("Copying required folders and files to temporary chart build directory...")
    for name in REQUIRED_DIRS:
        _copy(source_dir / name, build_dir / name, directory=True)
    for name in REQUIRED_FILES:
        _copy(source_dir / name, build_dir / name, directory=False)

    relative = Path(source or ".")
    for name in OPTIONAL_FILES:
        if project.has_file(relative / name):
            if progress_log:
                progress_log.write(f"Copying optional {name} file to temporary chart build directory...")
            _copy(source_dir / name, build_dir / name, directory=False)
    for name in OPTIONAL_DIRS:
        if project.has_directory(relative / name):
            if progress_log:
                progress_log.write(f"Copying optional {name} folder to temporary chart build directory...")
            _copy(source_dir / name, build_dir / name, directory=True)

    log.info("chart_build_dir_created", build_dir=str(build_dir))
    return build_dir
