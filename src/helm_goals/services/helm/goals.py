"""Goal factories for helm deploy, package and version goals."""

from __future__ import annotations

from typing import TYPE_CHECKING

from helm_goals.core.goals.base import Goal, GoalDefinition, GoalResult
from helm_goals.services.helm.install import execute_install
from helm_goals.services.helm.package import execute_package
from helm_goals.services.helm.versions import helm_project_versioner

if TYPE_CHECKING:
    from helm_goals.core.config.models import (
        HelmConfiguration,
        HelmGoalRegistration,
        HelmPackageRegistration,
    )
    from helm_goals.core.goals.base import GoalInvocation
    from helm_goals.services.helm.version_store import VersionStore
    from helm_goals.services.helm.versions import VersionLookup

HELM_DEPLOY = GoalDefinition.for_action("helm-deploy", "Helm Deploy")
HELM_PACKAGE = GoalDefinition.for_action("helm-package", "Helm Package")
HELM_VERSION = GoalDefinition.for_action("helm-version", "Helm Version")


def helm_deploy(
    config: HelmConfiguration,
    registration: HelmGoalRegistration,
    *,
    name: str = HELM_DEPLOY.unique_name,
    lookup: VersionLookup | None = None,
) -> Goal:
    """Goal that installs or upgrades a release."""

    def executor(invocation: GoalInvocation) -> GoalResult:
        return execute_install(config, registration, invocation, lookup=lookup)

    return Goal(name=name, definition=HELM_DEPLOY, executor=executor)


def helm_package(
    config: HelmConfiguration,
    registration: HelmPackageRegistration,
    *,
    name: str = HELM_PACKAGE.unique_name,
) -> Goal:
    """Goal that packages the chart and optionally pushes it."""

    def executor(invocation: GoalInvocation) -> GoalResult:
        return execute_package(config, registration, invocation)

    return Goal(name=name, definition=HELM_PACKAGE, executor=executor)


def helm_version(
    store: VersionStore,
    *,
    name: str = HELM_VERSION.unique_name,
) -> Goal:
    """Goal that assigns a pre-release version to the push and records it."""

    def executor(invocation: GoalInvocation) -> GoalResult:
        event = invocation.event
        version = helm_project_versioner(event, invocation.project, invocation.progress_log)
        store.record_version(event.owner, event.repo, event.provider_id, event.sha, event.branch, version)
        invocation.context["version"] = version
        return GoalResult(message=version)

    return Goal(name=name, definition=HELM_VERSION, executor=executor)
