"""Configuration and goal registration models."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from helm_goals.integrations.helm.exceptions import ConfigurationError
from helm_goals.integrations.helm.models import Operation, parse_option

logger = structlog.get_logger()

# XDG-compliant config location
CONFIG_DIR = Path.home() / ".config" / "helm-goals"
CONFIG_FILE = CONFIG_DIR / "config.yaml"
DEFAULT_VERSION_STORE = "~/.local/state/helm-goals/versions.yaml"

OptionList = list[str | dict[str, str]]

_TRUTHY = {"1", "true", "yes", "on"}


def _validate_option_list(v: OptionList) -> OptionList:
    """Reject option mappings that do not hold exactly one key."""
    for entry in v:
        parse_option(entry)
    return v


# ---------------------------------------------------------------------------
# Chart and release details
# ---------------------------------------------------------------------------


class ChartDetail(BaseModel):
    """Identifies the chart artifact a goal acts on."""

    model_config = ConfigDict(extra="forbid")

    name: str
    version: str | None = None
    registry: str | None = Field(
        default=None,
        description="Repository prefix for the chart reference; 'local' when unset",
    )
    options: OptionList = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate the chart name is not blank."""
        if not v.strip():
            raise ValueError("chart name must not be empty")
        return v

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: OptionList) -> OptionList:
        """Validate option entries."""
        return _validate_option_list(v)

    @property
    def reference(self) -> str:
        """Chart reference passed to install/upgrade, ``<registry>/<name>``."""
        return f"{self.registry or 'local'}/{self.name}"


class ReleaseDetail(BaseModel):
    """Identifies the deployed release a goal targets."""

    model_config = ConfigDict(extra="forbid")

    name: str
    namespace: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate the release name is not blank."""
        if not v.strip():
            raise ValueError("release name must not be empty")
        return v


class PushConfig(BaseModel):
    """Chart repository upload settings."""

    model_config = ConfigDict(extra="forbid")

    registry: str
    username: str | None = None
    password: str | None = None
    token: str | None = None
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra httpx request arguments, merged last. Use with care.",
    )

    @field_validator("registry")
    @classmethod
    def validate_registry(cls, v: str) -> str:
        """Validate registry URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("registry must start with http:// or https://")
        return v


# ---------------------------------------------------------------------------
# Global helm configuration
# ---------------------------------------------------------------------------


class HelmConfiguration(BaseModel):
    """Process-wide helm defaults applied to every goal."""

    model_config = ConfigDict(extra="forbid")

    cmd: str = "helm"
    k8s_context: str | None = None
    global_options: OptionList = Field(default_factory=list)
    log_command: bool = False

    @field_validator("global_options")
    @classmethod
    def validate_global_options(cls, v: OptionList) -> OptionList:
        """Validate option entries."""
        return _validate_option_list(v)


class HelmGoalsConfig(BaseModel):
    """Complete helm-goals configuration file."""

    model_config = ConfigDict(extra="forbid")

    helm: HelmConfiguration = HelmConfiguration()
    version_store: str = Field(default=DEFAULT_VERSION_STORE, validate_default=True)

    @field_validator("version_store")
    @classmethod
    def validate_version_store(cls, v: str) -> str:
        """Expand ~ in the version store path."""
        return str(Path(v).expanduser())

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> HelmGoalsConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            HELM_GOALS_CMD: Path or name of the helm binary
            HELM_GOALS_K8S_CONTEXT: Cluster context for install/upgrade/list
            HELM_GOALS_LOG_COMMAND: Log full helm command lines (true/false)
            HELM_GOALS_VERSION_STORE: Path of the tracked version store
        """
        config_dict = dict(base_config) if base_config else {}
        helm = dict(config_dict.get("helm") or {})

        if cmd := os.environ.get("HELM_GOALS_CMD"):
            helm["cmd"] = cmd

        if context := os.environ.get("HELM_GOALS_K8S_CONTEXT"):
            helm["k8s_context"] = context

        if log_command := os.environ.get("HELM_GOALS_LOG_COMMAND"):
            helm["log_command"] = log_command.strip().lower() in _TRUTHY

        if version_store := os.environ.get("HELM_GOALS_VERSION_STORE"):
            config_dict["version_store"] = version_store

        config_dict["helm"] = helm
        return cls.model_validate(config_dict)


def load_raw_config(path: Path | None = None) -> dict[str, Any]:
    """Read the YAML config file.

    Args:
        path: Config file path. Defaults to ~/.config/helm-goals/config.yaml.

    Returns:
        Parsed mapping, empty when the file is missing or blank.

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        logger.debug("config_not_found_using_defaults", path=str(config_path))
        return {}

    try:
        data = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {config_path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return data


def load_config(path: Path | None = None) -> HelmGoalsConfig:
    """Load configuration from file with environment overrides applied.

    Raises:
        ConfigurationError: If the file or the overrides do not validate.
    """
    try:
        config = HelmGoalsConfig.from_env(load_raw_config(path))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
    logger.debug("config_loaded", cmd=config.helm.cmd, version_store=config.version_store)
    return config


# ---------------------------------------------------------------------------
# Goal registrations
# ---------------------------------------------------------------------------


class HelmGoalRegistration(BaseModel):
    """Declares one install/upgrade goal.

    ``release_details`` and ``chart_details`` are either literal details
    (models or mappings) or creators called with
    ``(registration, invocation)`` when the goal runs. Their shape is
    checked when the goal runs, not here.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    release_details: Any
    chart_details: Any
    operation: Operation = Operation.INSTALL
    cmd_args: OptionList = Field(default_factory=list)
    env_args: dict[str, str] = Field(default_factory=dict)
    config_files: list[str] = Field(default_factory=list)

    @field_validator("cmd_args")
    @classmethod
    def validate_cmd_args(cls, v: OptionList) -> OptionList:
        """Validate option entries."""
        return _validate_option_list(v)


class HelmPackageRegistration(BaseModel):
    """Declares one package goal.

    ``version`` is a literal version, a creator returning a mapping or
    model with a ``version`` entry, or None to use the chart descriptor.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    source: str = "."
    version: Any = None
    app_version: str | None = None
    dependency_update: bool = False
    destination: str | None = None
    sign: str | None = None
    key: str | None = None
    keyring: str | None = None
    save: bool = False
    push: PushConfig | None = None
