"""Shared CLI options and helpers for goal commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console

from helm_goals.core.config.models import HelmGoalsConfig, load_config
from helm_goals.core.goals.base import GoalEvent, GoalInvocation, ProgressLog, Project

if TYPE_CHECKING:
    from helm_goals.core.goals.base import Goal, GoalResult

console = Console()

# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

ProjectOption = Annotated[
    Path,
    typer.Option(
        "--project",
        "-p",
        help="Project working tree",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
]

OwnerOption = Annotated[
    str,
    typer.Option("--owner", envvar="HELM_GOALS_OWNER", help="Repository owner of the push"),
]

RepoOption = Annotated[
    str,
    typer.Option("--repo", envvar="HELM_GOALS_REPO", help="Repository name of the push"),
]

ProviderOption = Annotated[
    str,
    typer.Option("--provider-id", envvar="HELM_GOALS_PROVIDER_ID", help="SCM provider id"),
]

ShaOption = Annotated[
    str,
    typer.Option("--sha", envvar="HELM_GOALS_SHA", help="Commit sha of the push"),
]

BranchOption = Annotated[
    str,
    typer.Option("--branch", envvar="HELM_GOALS_BRANCH", help="Branch of the push"),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class ConsoleProgressLog(ProgressLog):
    """Progress log that also prints each line to the console."""

    def write(self, message: str) -> None:
        super().write(message)
        console.print(f"[dim]{message}[/dim]")


def get_config(ctx: typer.Context) -> HelmGoalsConfig:
    """Configuration loaded by the main callback, or loaded now."""
    if isinstance(ctx.obj, dict) and isinstance(ctx.obj.get("config"), HelmGoalsConfig):
        return ctx.obj["config"]
    return load_config()


def build_invocation(
    project: Path,
    owner: str,
    repo: str,
    provider_id: str,
    sha: str,
    branch: str,
    goal: str,
) -> GoalInvocation:
    """Build a goal invocation for a local project."""
    return GoalInvocation(
        project=Project(project),
        event=GoalEvent(
            owner=owner,
            repo=repo or project.name,
            provider_id=provider_id,
            sha=sha,
            branch=branch,
        ),
        progress_log=ConsoleProgressLog(goal),
    )


def parse_pairs(values: list[str] | None, option: str) -> dict[str, str]:
    """Parse ``KEY=VALUE`` option values, keeping their order.

    Raises:
        typer.BadParameter: If a value has no ``=``.
    """
    pairs: dict[str, str] = {}
    for value in values or []:
        key, sep, item = value.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got '{value}'", param_hint=option)
        pairs[key] = item
    return pairs


def run_goal(goal: Goal, invocation: GoalInvocation) -> GoalResult:
    """Execute a goal and exit with its code when it fails."""
    result = goal.execute(invocation)
    if result.success:
        console.print(f"[green]{goal.definition.completed_description}[/green]")
        return result

    console.print(f"[red]{goal.definition.failed_description}:[/red] {result.message}")
    raise typer.Exit(result.code)
