"""Install/upgrade goal execution."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from helm_goals.core.config.models import ChartDetail, ReleaseDetail
from helm_goals.core.goals.base import SUCCESS
from helm_goals.integrations.helm.exceptions import UnresolvableOperationError
from helm_goals.integrations.helm.helm_client import HelmClient
from helm_goals.integrations.helm.models import Operation
from helm_goals.services.helm.args import build_helm_args
from helm_goals.services.helm.details import resolve_details
from helm_goals.services.helm.operation import determine_helm_operation
from helm_goals.services.helm.versions import determine_chart_version

if TYPE_CHECKING:
    from helm_goals.core.config.models import HelmConfiguration, HelmGoalRegistration
    from helm_goals.core.goals.base import GoalInvocation, GoalResult
    from helm_goals.services.helm.versions import VersionLookup

logger = structlog.get_logger()


def build_install_command(
    operation: Operation,
    chart_details: ChartDetail,
    release_details: ReleaseDetail,
    version: str | None,
    cmd_args: Sequence[str] = (),
) -> list[str]:
    """Build the helm install or upgrade argument list.

    Args:
        operation: Concrete operation; installOrUpgrade must be resolved first.
        chart_details: Chart to deploy.
        release_details: Release to create or upgrade.
        version: Chart version, omitted when None.
        cmd_args: Synthesized extra arguments, appended last.

    Raises:
        UnresolvableOperationError: If the operation is not install or upgrade.
    """
    if operation is Operation.INSTALL:
        command = ["install", chart_details.reference]
        if version:
            command.extend(["--version", version])
        command.extend(["--name", release_details.name])
        if release_details.namespace:
            command.extend(["--namespace", release_details.namespace])
    elif operation is Operation.UPGRADE:
        command = ["upgrade", release_details.name, chart_details.reference]
        if version:
            command.extend(["--version", version])
    else:
        raise UnresolvableOperationError(str(operation))

    command.extend(cmd_args)
    return command


def execute_install(
    config: HelmConfiguration,
    registration: HelmGoalRegistration,
    invocation: GoalInvocation,
    *,
    helm: HelmClient | None = None,
    lookup: VersionLookup | None = None,
) -> GoalResult:
    """Install or upgrade a release.

    Resolves chart and release details, the chart version and the concrete
    operation, refreshes the repositories, then runs the command.

    Args:
        config: Global helm configuration.
        registration: The deploy goal registration.
        invocation: Current goal invocation.
        helm: Helm client, built from ``config`` when None.
        lookup: Tracked version lookup.

    Returns:
        SUCCESS when helm exits cleanly.

    Raises:
        ConfigurationError: If chart or release details have an unknown shape.
        OperationConflictError: If installOrUpgrade targets a failed release.
        HelmCommandError: If repo update or the main command fails.
    """
    progress = invocation.progress_log

    chart_details = resolve_details(
        registration.chart_details, ChartDetail, "chart details", registration, invocation
    )
    release_details = resolve_details(
        registration.release_details, ReleaseDetail, "release details", registration, invocation
    )
    log = logger.bind(chart=chart_details.name, release=release_details.name)

    if helm is None:
        helm = HelmClient(
            config.cmd,
            kube_context=config.k8s_context,
            log_command=config.log_command,
        )

    version = determine_chart_version(chart_details, invocation, lookup)
    operation = determine_helm_operation(registration.operation, release_details, helm)

    cmd_args = build_helm_args(
        config.global_options,
        registration.cmd_args,
        chart_details.options,
        registration.config_files,
    )
    command = build_install_command(operation, chart_details, release_details, version, cmd_args)
    log.debug("helm_command_built", operation=str(operation), version=version)

    progress.write("Updating helm chart repositories...")
    helm.repo_update()

    progress.write(f"Executing helm {operation} of {chart_details.reference} as {release_details.name}...")
    helm.run(command, cwd=invocation.project.base_dir, env=registration.env_args or None)

    progress.write(f"Helm {operation} of release {release_details.name} complete.")
    log.info("helm_release_applied", operation=str(operation), version=version)
    return SUCCESS
