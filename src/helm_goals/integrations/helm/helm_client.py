"""Helm CLI wrapper used by the helm goals.

Wraps the helm binary via subprocess for repository refresh, release
listing, install, upgrade and package operations.
"""

from __future__ import annotations

import json
import os
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

from helm_goals.integrations.helm.exceptions import HelmGoalsError
from helm_goals.integrations.helm.models import HelmCommandResult, HelmRelease

logger = structlog.get_logger()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_HELM_COMMAND = "helm"
HELM_TIMEOUT_SECONDS = 300
SHORT_TIMEOUT_SECONDS = 30

# Subcommands that talk to the cluster and therefore honour --kube-context.
CLUSTER_COMMANDS = frozenset({"install", "upgrade", "list"})


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class HelmError(HelmGoalsError):
    """Base exception for helm subprocess problems."""

    def __init__(
        self,
        message: str,
        stderr: str | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message=message, exit_code=exit_code)
        self.stderr = stderr


class HelmBinaryNotFoundError(HelmError):
    """Raised when the helm binary cannot be located."""

    def __init__(self, command: str = DEFAULT_HELM_COMMAND) -> None:
        super().__init__(
            message=(
                f"helm binary '{command}' not found. "
                "Install from: https://helm.sh/docs/intro/install/"
            ),
        )
        self.command = command


class HelmCommandError(HelmError):
    """Raised when a helm command exits with a non-zero status."""


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class HelmClient:
    """Client for running helm commands on behalf of a goal.

    Commands are executed one at a time; a non-zero exit raises
    HelmCommandError carrying the exit code.
    """

    def __init__(
        self,
        command: str = DEFAULT_HELM_COMMAND,
        *,
        kube_context: str | None = None,
        log_command: bool = False,
    ) -> None:
        """Initialize Helm client.

        Args:
            command: Name or path of the helm binary.
            kube_context: Cluster context passed to cluster-facing commands.
            log_command: Log full command lines. These may contain credentials.

        Raises:
            HelmBinaryNotFoundError: If the binary cannot be found.
        """
        self._binary = self._find_binary(command)
        self._kube_context = kube_context
        self._log_command = log_command
        self._log = logger.bind(binary=self._binary)
        self._log.debug("helm_client_initialized", kube_context=kube_context)

    @staticmethod
    def _find_binary(command: str) -> str:
        """Locate the helm binary.

        Args:
            command: Explicit path, or a name to search on PATH.

        Returns:
            Path to the helm binary.

        Raises:
            HelmBinaryNotFoundError: If not found.
        """
        if os.sep in command:
            path = Path(command).expanduser()
            if not path.exists():
                raise HelmBinaryNotFoundError(command)
            return str(path.resolve())

        found = shutil.which(command)
        if not found:
            raise HelmBinaryNotFoundError(command)

        return found

    @property
    def binary(self) -> str:
        """Resolved path of the helm binary."""
        return self._binary

    def _run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        timeout: int = HELM_TIMEOUT_SECONDS,
    ) -> subprocess.CompletedProcess[str]:
        """Run a helm command.

        Args:
            args: Command arguments (without the binary).
            cwd: Working directory for the command.
            env: Extra environment variables layered over the current environment.
            timeout: Timeout in seconds.

        Returns:
            CompletedProcess result.

        Raises:
            HelmCommandError: On non-zero exit.
            HelmError: On timeout.
        """
        argv = list(args)
        action = " ".join(argv[:2]) if argv[:1] == ["repo"] else (argv[0] if argv else "")
        if self._kube_context and argv and argv[0] in CLUSTER_COMMANDS:
            argv.extend(["--kube-context", self._kube_context])
        cmd = [self._binary, *argv]

        if self._log_command:
            self._log.info("running_helm_command", command=" ".join(cmd), cwd=str(cwd or ""))
        else:
            self._log.debug("running_helm_command", action=action, cwd=str(cwd or ""))

        run_env = {**os.environ, **env} if env else None

        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=timeout,
                cwd=cwd,
                env=run_env,
            )
        except subprocess.CalledProcessError as e:
            detail = e.stderr.strip() if e.stderr else ""
            message = f"Failed to execute helm {action}!"
            if detail:
                message = f"{message} {detail}"
            raise HelmCommandError(
                message=message,
                stderr=e.stderr,
                exit_code=e.returncode,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise HelmError(
                message=f"Helm {action} timed out after {timeout}s",
            ) from e

    # -----------------------------------------------------------------------
    # Commands
    # -----------------------------------------------------------------------

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> HelmCommandResult:
        """Run a fully built helm command such as install, upgrade or package.

        Args:
            args: Command arguments, starting with the subcommand.
            cwd: Working directory for the command.
            env: Extra environment variables.

        Returns:
            Command result.
        """
        result = self._run(args, cwd=cwd, env=env)
        self._log.info("helm_command_success", action=args[0] if args else "")
        return HelmCommandResult(exit_code=result.returncode, stdout=result.stdout, stderr=result.stderr)

    def repo_update(self) -> HelmCommandResult:
        """Update chart repository indexes.

        Returns:
            Command result.
        """
        result = self._run(["repo", "update"], timeout=SHORT_TIMEOUT_SECONDS)
        self._log.info("helm_repo_updated")
        return HelmCommandResult(exit_code=result.returncode, stdout=result.stdout, stderr=result.stderr)

    def list_releases(
        self,
        *,
        failed: bool = True,
        deployed: bool = True,
    ) -> list[HelmRelease]:
        """List releases known to the cluster.

        Args:
            failed: Include releases in the FAILED state.
            deployed: Include releases in the DEPLOYED state.

        Returns:
            List of releases.

        Raises:
            HelmError: If helm prints output that is not valid JSON.
        """
        args = ["list"]
        if failed:
            args.append("--failed")
        if deployed:
            args.append("--deployed")
        args.extend(["--output", "json"])

        result = self._run(args, timeout=SHORT_TIMEOUT_SECONDS)
        if not result.stdout.strip():
            return []

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise HelmError(
                message=f"Unable to parse helm release list: {e}",
                stderr=result.stderr,
            ) from e

        # helm 2 wraps entries in {"Releases": [...]}, helm 3 prints a bare list
        entries = data if isinstance(data, list) else (data or {}).get("Releases") or []
        return [HelmRelease.from_json(entry) for entry in entries]
