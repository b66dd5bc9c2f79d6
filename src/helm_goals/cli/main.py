"""Main CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from helm_goals import __version__
from helm_goals.cli.commands import goals
from helm_goals.core.config.models import load_config
from helm_goals.integrations.helm.exceptions import ConfigurationError
from helm_goals.logging.config import configure_logging

app = typer.Typer(
    name="helm-goals",
    help="Package Helm charts and deploy releases as delivery goals.",
    add_completion=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"helm-goals version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit logs as JSON.",
    ),
    log_file: bool = typer.Option(
        True,
        "--log-file/--no-log-file",
        envvar="HELM_GOALS_LOG_FILE",
        help="Also write logs to ~/.local/state/helm-goals/helm-goals.log.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        envvar="HELM_GOALS_CONFIG",
        help="Path to the configuration file.",
        dir_okay=False,
    ),
) -> None:
    """Helm goals - package charts and deploy releases."""
    configure_logging(verbose=verbose, debug=debug, json_output=json_logs, log_to_file=log_file)
    try:
        ctx.obj = {"config": load_config(config)}
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


# Register subcommands
app.command()(goals.detect)
app.command()(goals.version)
app.command()(goals.package)
app.command()(goals.deploy)


if __name__ == "__main__":
    app()
