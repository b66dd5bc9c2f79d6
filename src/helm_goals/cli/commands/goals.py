"""CLI commands running helm goals against a local project.

Provides detect, version, package and deploy commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from helm_goals.cli.commands.base import (
    BranchOption,
    OwnerOption,
    ProjectOption,
    ProviderOption,
    RepoOption,
    ShaOption,
    build_invocation,
    console,
    get_config,
    parse_pairs,
    run_goal,
)
from helm_goals.core.config.models import (
    ChartDetail,
    HelmGoalRegistration,
    HelmPackageRegistration,
    PushConfig,
    ReleaseDetail,
)
from helm_goals.core.goals.base import GoalInvocation, Project
from helm_goals.integrations.helm.models import Operation
from helm_goals.services.helm.chart_data import is_helm_project, read_chart_data
from helm_goals.services.helm.goals import helm_deploy, helm_package, helm_version
from helm_goals.services.helm.version_store import VersionStore
from helm_goals.services.helm.versions import helm_version_project_listener

# ---------------------------------------------------------------------------
# detect
# ---------------------------------------------------------------------------


def detect(project: ProjectOption = Path(".")) -> None:
    """Check whether the project contains a Helm chart."""
    if is_helm_project(Project(project)):
        console.print(f"[green]Helm chart found in[/green] {project}")
        return
    console.print(f"[yellow]No Helm chart found in[/yellow] {project}")
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


def version(
    ctx: typer.Context,
    project: ProjectOption = Path("."),
    owner: OwnerOption = "",
    repo: RepoOption = "",
    provider_id: ProviderOption = "",
    sha: ShaOption = "",
    branch: BranchOption = "main",
) -> None:
    """Assign a pre-release chart version to this push and record it."""
    config = get_config(ctx)
    goal = helm_version(VersionStore(Path(config.version_store)))
    invocation = build_invocation(project, owner, repo, provider_id, sha, branch, goal.name)
    result = run_goal(goal, invocation)
    console.print(result.message)


# ---------------------------------------------------------------------------
# package
# ---------------------------------------------------------------------------


def package(
    ctx: typer.Context,
    project: ProjectOption = Path("."),
    source: Annotated[str, typer.Option("--source", help="Chart source path")] = ".",
    chart_version: Annotated[
        str | None, typer.Option("--version", help="Chart version (default: Chart.yaml)")
    ] = None,
    app_version: Annotated[str | None, typer.Option("--app-version", help="App version")] = None,
    dependency_update: Annotated[
        bool, typer.Option("--dependency-update", "-u", help="Update dependencies first")
    ] = False,
    destination: Annotated[
        str | None, typer.Option("--destination", "-d", help="Archive output directory")
    ] = None,
    sign: Annotated[str | None, typer.Option("--sign", help="Sign with this PGP key id")] = None,
    key: Annotated[str | None, typer.Option("--key", help="Name of the signing key")] = None,
    keyring: Annotated[str | None, typer.Option("--keyring", help="Public keyring path")] = None,
    save: Annotated[bool, typer.Option("--save", help="Save to local chart repository")] = False,
    push_registry: Annotated[
        str | None, typer.Option("--push", help="Chart repository upload URL")
    ] = None,
    push_username: Annotated[
        str | None, typer.Option("--push-username", envvar="HELM_GOALS_PUSH_USERNAME")
    ] = None,
    push_password: Annotated[
        str | None, typer.Option("--push-password", envvar="HELM_GOALS_PUSH_PASSWORD")
    ] = None,
    push_token: Annotated[
        str | None, typer.Option("--push-token", envvar="HELM_GOALS_PUSH_TOKEN")
    ] = None,
    tracked_version: Annotated[
        bool,
        typer.Option("--tracked-version", help="Apply the version recorded for this push first"),
    ] = False,
    owner: OwnerOption = "",
    repo: RepoOption = "",
    provider_id: ProviderOption = "",
    sha: ShaOption = "",
    branch: BranchOption = "main",
) -> None:
    """Package the chart and optionally push it to a chart repository."""
    config = get_config(ctx)
    push = None
    if push_registry:
        push = PushConfig(
            registry=push_registry,
            username=push_username,
            password=push_password,
            token=push_token,
        )

    registration = HelmPackageRegistration(
        source=source,
        version=chart_version,
        app_version=app_version,
        dependency_update=dependency_update,
        destination=destination,
        sign=sign,
        key=key,
        keyring=keyring,
        save=save,
        push=push,
    )
    goal = helm_package(config.helm, registration)
    if tracked_version:
        goal.with_project_listener(
            helm_version_project_listener(VersionStore(Path(config.version_store)))
        )

    invocation = build_invocation(project, owner, repo, provider_id, sha, branch, goal.name)
    run_goal(goal, invocation)


# ---------------------------------------------------------------------------
# deploy
# ---------------------------------------------------------------------------


def _chart_from_project(chart_name: str | None, registry: str | None, chart_version: str | None) -> Any:
    """Chart details, reading the name from Chart.yaml when not given."""
    if chart_name:
        return ChartDetail(name=chart_name, registry=registry, version=chart_version)

    def creator(registration: HelmGoalRegistration, invocation: GoalInvocation) -> ChartDetail:
        chart = read_chart_data(invocation.project)
        return ChartDetail(name=chart.name, registry=registry, version=chart_version)

    return creator


def _release_from_project(release: str | None, namespace: str | None) -> Any:
    """Release details, named after the chart when not given."""
    if release:
        return ReleaseDetail(name=release, namespace=namespace)

    def creator(registration: HelmGoalRegistration, invocation: GoalInvocation) -> ReleaseDetail:
        chart = read_chart_data(invocation.project)
        return ReleaseDetail(name=chart.name, namespace=namespace)

    return creator


def deploy(
    ctx: typer.Context,
    project: ProjectOption = Path("."),
    release: Annotated[
        str | None, typer.Option("--release", "-r", help="Release name (default: chart name)")
    ] = None,
    namespace: Annotated[
        str | None, typer.Option("--namespace", "-n", help="Target namespace")
    ] = None,
    chart: Annotated[
        str | None, typer.Option("--chart", "-c", help="Chart name (default: Chart.yaml)")
    ] = None,
    registry: Annotated[
        str | None, typer.Option("--registry", help="Chart repository name (default: local)")
    ] = None,
    chart_version: Annotated[str | None, typer.Option("--version", help="Chart version")] = None,
    operation: Annotated[
        Operation, typer.Option("--operation", "-o", help="install, upgrade or installOrUpgrade")
    ] = Operation.INSTALL,
    set_values: Annotated[
        list[str] | None,
        typer.Option("--arg", "-a", help="Extra helm argument KEY=VALUE (repeatable)"),
    ] = None,
    flags: Annotated[
        list[str] | None,
        typer.Option("--flag", help="Extra bare helm flag without dashes (repeatable)"),
    ] = None,
    values_files: Annotated[
        list[str] | None,
        typer.Option("--values", "-f", help="Values YAML file (repeatable)"),
    ] = None,
    env: Annotated[
        list[str] | None,
        typer.Option("--env", "-e", help="Environment variable KEY=VALUE for helm"),
    ] = None,
    owner: OwnerOption = "",
    repo: RepoOption = "",
    provider_id: ProviderOption = "",
    sha: ShaOption = "",
    branch: BranchOption = "main",
) -> None:
    """Install or upgrade a release of the project's chart."""
    config = get_config(ctx)
    cmd_args: list[str | dict[str, str]] = [
        {k: v} for k, v in parse_pairs(set_values, "--arg").items()
    ]
    cmd_args.extend(flags or [])

    registration = HelmGoalRegistration(
        release_details=_release_from_project(release, namespace),
        chart_details=_chart_from_project(chart, registry, chart_version),
        operation=operation,
        cmd_args=cmd_args,
        env_args=parse_pairs(env, "--env"),
        config_files=values_files or [],
    )
    goal = helm_deploy(
        config.helm,
        registration,
        lookup=VersionStore(Path(config.version_store)),
    )

    invocation = build_invocation(project, owner, repo, provider_id, sha, branch, goal.name)
    run_goal(goal, invocation)
