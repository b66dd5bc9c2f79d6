"""Package goal execution: build the chart archive and optionally push it."""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import nullcontext
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from helm_goals.core.goals.base import SUCCESS
from helm_goals.integrations.helm.chart_repository import ChartRepositoryClient
from helm_goals.integrations.helm.exceptions import ConfigurationError
from helm_goals.integrations.helm.helm_client import HelmClient
from helm_goals.services.helm.build_dir import create_chart_build_dir
from helm_goals.services.helm.chart_data import read_chart_data

if TYPE_CHECKING:
    from helm_goals.core.config.models import HelmConfiguration, HelmPackageRegistration
    from helm_goals.core.goals.base import GoalInvocation, GoalResult

logger = structlog.get_logger()


def resolve_package_version(
    registration: HelmPackageRegistration,
    invocation: GoalInvocation,
) -> str | None:
    """Resolve the version requested by a package registration.

    Returns:
        The literal version, the ``version`` produced by a creator, or
        None when the registration leaves it to the chart descriptor.

    Raises:
        ConfigurationError: If the version field or creator result has an
            unknown shape.
    """
    version: Any = registration.version
    if version is None or isinstance(version, str):
        return version or None

    if callable(version):
        result = version(registration, invocation)
        if isinstance(result, Mapping):
            produced = result.get("version")
        else:
            produced = getattr(result, "version", None)
        if produced is not None and not isinstance(produced, str):
            raise ConfigurationError(
                f"Package version creator returned {type(produced).__name__}, expected str"
            )
        return produced or None

    raise ConfigurationError(f"Unknown registration type for package version: {type(version).__name__}")


def build_package_command(
    registration: HelmPackageRegistration,
    version: str | None,
) -> list[str]:
    """Build the ``helm package`` argument list."""
    command = ["package", registration.source or "."]
    if version:
        command.extend(["--version", version])
    if registration.app_version:
        command.extend(["--app-version", registration.app_version])
    if registration.dependency_update:
        command.append("-u")
    if registration.destination:
        command.extend(["-d", registration.destination])
    if registration.key:
        command.extend(["--key", registration.key])
    if registration.keyring:
        command.extend(["--keyring", registration.keyring])
    if registration.save:
        command.append("--save")
    if registration.sign:
        command.append("--sign")
    return command


def chart_archive_path(
    build_dir: Path,
    registration: HelmPackageRegistration,
    chart_name: str,
    version: str,
) -> Path:
    """Location of the archive written by ``helm package``.

    helm writes ``<name>-<version>.tgz`` into the destination directory,
    which is resolved against the build directory it runs in.
    """
    target_dir = build_dir / registration.destination if registration.destination else build_dir
    return target_dir / f"{chart_name}-{version}.tgz"


def execute_package(
    config: HelmConfiguration,
    registration: HelmPackageRegistration,
    invocation: GoalInvocation,
    *,
    helm: HelmClient | None = None,
    repository: ChartRepositoryClient | None = None,
) -> GoalResult:
    """Package the project's chart and push it when configured.

    Args:
        config: Global helm configuration.
        registration: The package goal registration.
        invocation: Current goal invocation.
        helm: Helm client, built from ``config`` when None.
        repository: Chart repository client, built from ``registration.push``
            when None.

    Returns:
        SUCCESS when the chart was packaged (and uploaded).

    Raises:
        ChartNotFoundError: If the project has no chart descriptor.
        ChartBuildError: If the build directory cannot be assembled.
        HelmCommandError: If helm package fails.
        ChartUploadError: If the upload fails.
    """
    progress = invocation.progress_log
    project = invocation.project

    progress.write("Determining helm chart name and version...")
    version = resolve_package_version(registration, invocation)

    chart = read_chart_data(project)
    progress.write(f"Set helm chart name and version to {chart.name}:{chart.version}")
    if not version:
        version = chart.version
    log = logger.bind(chart=chart.name, version=version)

    build_dir = create_chart_build_dir(chart.name, project, registration.source, progress)
    command = build_package_command(registration, version)

    if helm is None:
        helm = HelmClient(config.cmd, log_command=config.log_command)

    progress.write("Executing helm package...")
    helm.run(command, cwd=build_dir)
    log.info("helm_chart_packaged", build_dir=str(build_dir))

    if registration.push:
        if not version:
            raise ConfigurationError(f"Cannot determine version of chart {chart.name} to upload")
        archive = chart_archive_path(build_dir, registration, chart.name, version)
        progress.write(f"Uploading helm package to registry {registration.push.registry}...")
        client_context = nullcontext(repository) if repository else ChartRepositoryClient(registration.push)
        with client_context as client:
            client.upload(archive)

    progress.write("Success!")
    return SUCCESS
