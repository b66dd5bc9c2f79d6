"""Helm goal services: argument synthesis, chart handling and executors."""

from helm_goals.services.helm.args import build_helm_args
from helm_goals.services.helm.build_dir import create_chart_build_dir
from helm_goals.services.helm.chart_data import (
    ChartData,
    is_helm_project,
    read_chart_data,
    write_chart_version,
)
from helm_goals.services.helm.goals import helm_deploy, helm_package, helm_version
from helm_goals.services.helm.install import build_install_command, execute_install
from helm_goals.services.helm.operation import determine_helm_operation
from helm_goals.services.helm.package import build_package_command, execute_package
from helm_goals.services.helm.version_store import VersionStore
from helm_goals.services.helm.versions import (
    VersionLookup,
    determine_chart_version,
    helm_project_versioner,
    helm_version_project_listener,
)

__all__ = [
    "ChartData",
    "VersionLookup",
    "VersionStore",
    "build_helm_args",
    "build_install_command",
    "build_package_command",
    "create_chart_build_dir",
    "determine_chart_version",
    "determine_helm_operation",
    "execute_install",
    "execute_package",
    "helm_deploy",
    "helm_package",
    "helm_project_versioner",
    "helm_version",
    "helm_version_project_listener",
    "is_helm_project",
    "read_chart_data",
    "write_chart_version",
]
