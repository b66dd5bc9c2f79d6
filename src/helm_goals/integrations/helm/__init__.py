"""Helm integration - CLI wrapper, chart repository client and models."""

from helm_goals.integrations.helm.chart_repository import ChartRepositoryClient
from helm_goals.integrations.helm.exceptions import (
    ChartBuildError,
    ChartNotFoundError,
    ChartUploadError,
    ConfigurationError,
    HelmGoalsError,
    OperationConflictError,
    UnresolvableOperationError,
)
from helm_goals.integrations.helm.helm_client import (
    HelmBinaryNotFoundError,
    HelmClient,
    HelmCommandError,
    HelmError,
)
from helm_goals.integrations.helm.models import (
    Flag,
    HelmCommandResult,
    HelmOption,
    HelmRelease,
    KeyValue,
    Operation,
)

__all__ = [
    "ChartBuildError",
    "ChartNotFoundError",
    "ChartRepositoryClient",
    "ChartUploadError",
    "ConfigurationError",
    "Flag",
    "HelmBinaryNotFoundError",
    "HelmClient",
    "HelmCommandError",
    "HelmCommandResult",
    "HelmError",
    "HelmGoalsError",
    "HelmOption",
    "HelmRelease",
    "KeyValue",
    "OperationConflictError",
    "Operation",
    "UnresolvableOperationError",
]
