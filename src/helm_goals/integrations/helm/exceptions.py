"""Helm goal custom exceptions."""

from __future__ import annotations


class HelmGoalsError(Exception):
    """Base exception for helm goal operations.

    Every subclass is terminal for the goal invocation that raised it.

    Attributes:
        message: Human-readable error message.
        exit_code: Exit code reported to the pipeline (if applicable).
    """

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
    ) -> None:
        """Initialize HelmGoalsError.

        Args:
            message: Human-readable error message.
            exit_code: Exit code to surface to the pipeline.
        """
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.exit_code:
            return f"{self.message} (exit code: {self.exit_code})"
        return self.message


class ConfigurationError(HelmGoalsError):
    """Raised when a goal registration has an unusable shape.

    This covers chart or release details that are neither a literal
    value nor a creator, and creators that return something else.
    """


class ChartNotFoundError(HelmGoalsError):
    """Raised when no chart descriptor exists in the project."""

    def __init__(
        self,
        message: str = "Cannot find Chart.yaml",
        base_dir: str | None = None,
    ) -> None:
        """Initialize ChartNotFoundError.

        Args:
            message: Human-readable error message.
            base_dir: Project directory that was searched.
        """
        if base_dir:
            message = f"{message} in {base_dir}"
        super().__init__(message=message)
        self.base_dir = base_dir


class ChartBuildError(HelmGoalsError):
    """Raised when the chart build directory cannot be assembled.

    Either the directory could not be created or a required chart
    file is missing from the source tree.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize ChartBuildError.

        Args:
            message: Human-readable error message.
            path: Path involved in the failure.
            original_error: The underlying OSError.
        """
        super().__init__(message=message)
        self.path = path
        self.original_error = original_error


class OperationConflictError(HelmGoalsError):
    """Raised when installOrUpgrade targets a release in a failed state."""

    def __init__(self, release_name: str) -> None:
        """Initialize OperationConflictError.

        Args:
            release_name: Name of the failed release.
        """
        super().__init__(
            message=f"Helm release {release_name} is in a failed state, cannot upgrade!",
        )
        self.release_name = release_name


class UnresolvableOperationError(HelmGoalsError):
    """Raised when no concrete install/upgrade operation could be chosen."""

    def __init__(self, operation: str | None = None) -> None:
        """Initialize UnresolvableOperationError.

        Args:
            operation: The requested operation that could not be resolved.
        """
        super().__init__(
            message=f"Could not determine operation type for helm command (requested: {operation})",
        )
        self.operation = operation


class ChartUploadError(HelmGoalsError):
    """Raised when pushing a packaged chart to a repository fails."""

    def __init__(
        self,
        registry: str,
        status_code: int | None = None,
        error: str | None = None,
    ) -> None:
        """Initialize ChartUploadError.

        Args:
            registry: Repository URL the upload was sent to.
            status_code: HTTP status code from the repository (if any).
            error: Response body or transport error text.
        """
        super().__init__(
            message=f"Failed to upload chart. Error Code: {status_code}, {error}",
        )
        self.registry = registry
        self.status_code = status_code
        self.error = error
