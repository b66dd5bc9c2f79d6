"""Install-or-upgrade resolution against live release state."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from helm_goals.integrations.helm.exceptions import (
    OperationConflictError,
    UnresolvableOperationError,
)
from helm_goals.integrations.helm.models import Operation

if TYPE_CHECKING:
    from helm_goals.core.config.models import ReleaseDetail
    from helm_goals.integrations.helm.helm_client import HelmClient

logger = structlog.get_logger()


def determine_helm_operation(
    operation: Operation | str | None,
    release_details: ReleaseDetail,
    helm: HelmClient,
) -> Operation:
    """Resolve the requested operation to install or upgrade.

    ``install`` and ``upgrade`` are returned as-is without querying helm.
    ``installOrUpgrade`` lists failed and deployed releases: a release with
    the same name means upgrade, no such release means install.

    Args:
        operation: Requested operation, None meaning install.
        release_details: Target release.
        helm: Client used to list releases.

    Returns:
        Operation.INSTALL or Operation.UPGRADE.

    Raises:
        OperationConflictError: If the release exists in a failed state.
        UnresolvableOperationError: If the request is not a known operation.
        HelmError: If the release list cannot be fetched or parsed.
    """
    try:
        requested = Operation(operation or Operation.INSTALL)
    except ValueError as e:
        raise UnresolvableOperationError(str(operation)) from e

    if requested is not Operation.INSTALL_OR_UPGRADE:
        return requested

    releases = helm.list_releases(failed=True, deployed=True)
    release = next((r for r in releases if r.name == release_details.name), None)

    if release is None:
        resolved = Operation.INSTALL
    elif release.is_failed:
        raise OperationConflictError(release_details.name)
    else:
        resolved = Operation.UPGRADE

    logger.info(
        "helm_operation_resolved",
        release=release_details.name,
        operation=str(resolved),
        current_status=release.status if release else None,
    )
    return resolved
