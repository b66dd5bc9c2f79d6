"""HTTP client for pushing packaged charts to a chart repository."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from helm_goals.integrations.helm.exceptions import ChartUploadError

if TYPE_CHECKING:
    from helm_goals.core.config.models import PushConfig

logger = structlog.get_logger()

DEFAULT_UPLOAD_TIMEOUT = 60.0

# Keyword arguments accepted by httpx.Client.request
UPLOAD_REQUEST_OPTIONS = frozenset(
    {
        "method",
        "url",
        "content",
        "data",
        "files",
        "json",
        "params",
        "headers",
        "cookies",
        "auth",
        "follow_redirects",
        "timeout",
        "extensions",
    }
)


class ChartRepositoryClient:
    """Uploads chart archives to a repository such as ChartMuseum.

    The archive is streamed as the body of a single POST request. No
    retries are attempted; a failed upload fails the goal.

    Example:
        ```python
        push = PushConfig(registry="http://localhost:8080/api/charts")
        with ChartRepositoryClient(push) as client:
            client.upload(Path("mychart/mychart-1.0.0.tgz"))
        ```
    """

    def __init__(
        self,
        push: PushConfig,
        *,
        timeout: float = DEFAULT_UPLOAD_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the repository client.

        Args:
            push: Repository URL, credentials and extra request options.
            timeout: Request timeout in seconds.
            client: Optional pre-built httpx client.
        """
        self.push = push
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))
        self._log = logger.bind(registry=push.registry)

    def _auth_kwargs(self) -> dict[str, Any]:
        """Build authentication request arguments.

        Basic auth wins when both username and password are set, then a
        bearer token; otherwise the request is anonymous.
        """
        if self.push.username and self.push.password:
            self._log.debug("chart_upload_auth", auth_type="basic")
            return {"auth": httpx.BasicAuth(self.push.username, self.push.password)}
        if self.push.token:
            self._log.debug("chart_upload_auth", auth_type="bearer")
            return {"headers": {"Authorization": f"Bearer {self.push.token}"}}
        return {}

    def upload(self, chart_path: Path) -> httpx.Response:
        """Upload a chart archive.

        Caller-supplied request options are merged last and may replace
        the method, URL or body.

        Args:
            chart_path: Path of the ``.tgz`` archive produced by helm package.

        Returns:
            The successful HTTP response.

        Raises:
            ChartUploadError: On unsupported request options, a non-2xx
                response, a transport error or an unreadable archive.
        """
        unsupported = sorted(set(self.push.options) - UPLOAD_REQUEST_OPTIONS)
        if unsupported:
            self._log.error("chart_upload_bad_options", options=unsupported)
            raise ChartUploadError(
                registry=self.push.registry,
                error=f"unsupported request options: {', '.join(unsupported)}",
            )

        self._log.info("uploading_chart", chart=str(chart_path))

        try:
            with chart_path.open("rb") as archive:
                request_kwargs: dict[str, Any] = {
                    "method": "POST",
                    "url": self.push.registry,
                    "content": archive,
                    **self._auth_kwargs(),
                }
                request_kwargs.update(self.push.options)
                response = self._client.request(**request_kwargs)
        except httpx.HTTPError as e:
            self._log.error("chart_upload_transport_error", error=str(e))
            raise ChartUploadError(registry=self.push.registry, error=str(e)) from e
        except OSError as e:
            self._log.error("chart_archive_unreadable", chart=str(chart_path), error=str(e))
            raise ChartUploadError(registry=self.push.registry, error=str(e)) from e

        if not response.is_success:
            self._log.error("chart_upload_rejected", status=response.status_code)
            raise ChartUploadError(
                registry=self.push.registry,
                status_code=response.status_code,
                error=response.text,
            )

        self._log.info("chart_uploaded", chart=str(chart_path), status=response.status_code)
        return response

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> ChartRepositoryClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
