"""Configuration management with Pydantic validation."""

from helm_goals.core.config.models import (
    ChartDetail,
    HelmConfiguration,
    HelmGoalRegistration,
    HelmGoalsConfig,
    HelmPackageRegistration,
    PushConfig,
    ReleaseDetail,
    load_config,
)

__all__ = [
    "ChartDetail",
    "HelmConfiguration",
    "HelmGoalRegistration",
    "HelmGoalsConfig",
    "HelmPackageRegistration",
    "PushConfig",
    "ReleaseDetail",
    "load_config",
]
