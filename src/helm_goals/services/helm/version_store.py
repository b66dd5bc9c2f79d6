"""File-backed store of versions assigned to pushes.

The version goal records the version it computed for a push; later goals
for the same push look it up.

Default location: ~/.local/state/helm-goals/versions.yaml
"""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field

from helm_goals.core.config.models import DEFAULT_VERSION_STORE

logger = structlog.get_logger()


class TrackedVersion(BaseModel):
    """A version assigned to one push."""

    owner: str
    repo: str
    provider_id: str = ""
    sha: str
    branch: str = ""
    version: str

    def matches(self, owner: str, repo: str, provider_id: str, sha: str, branch: str) -> bool:
        """Whether this entry belongs to the given push."""
        return (self.owner, self.repo, self.provider_id, self.sha, self.branch) == (
            owner,
            repo,
            provider_id,
            sha,
            branch,
        )


class TrackedVersions(BaseModel):
    """Contents of the version store file."""

    versions: list[TrackedVersion] = Field(default_factory=list)


class VersionStore:
    """Reads and records tracked versions in a YAML file.

    Example:
        >>> store = VersionStore(Path("/tmp/versions.yaml"))
        >>> store.record_version("acme", "charts", "github", "abc123", "main", "1.0.0-main.1")
        >>> store.lookup_version("acme", "charts", "github", "abc123", "main")
        '1.0.0-main.1'
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize the store.

        Args:
            path: Store file. Defaults to ~/.local/state/helm-goals/versions.yaml
        """
        self.path = path or Path(DEFAULT_VERSION_STORE).expanduser()
        self._log = logger.bind(service="version_store")

    def load(self) -> TrackedVersions:
        """Load tracked versions, empty when the file is missing or blank."""
        if not self.path.exists():
            self._log.debug("version_store_not_found_returning_empty", path=str(self.path))
            return TrackedVersions()

        content = self.path.read_text()
        if not content.strip():
            return TrackedVersions()

        data = yaml.safe_load(content)
        if data is None:
            return TrackedVersions()

        return TrackedVersions.model_validate(data)

    def save(self, tracked: TrackedVersions) -> None:
        """Write tracked versions, creating the parent directory."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w") as f:
            yaml.safe_dump(tracked.model_dump(), f, default_flow_style=False, sort_keys=False)
        self._log.debug("version_store_saved", path=str(self.path), count=len(tracked.versions))

    def lookup_version(
        self,
        owner: str,
        repo: str,
        provider_id: str,
        sha: str,
        branch: str,
    ) -> str | None:
        """Get the version recorded for a push, or None."""
        for entry in self.load().versions:
            if entry.matches(owner, repo, provider_id, sha, branch):
                self._log.debug("tracked_version_found", sha=sha, version=entry.version)
                return entry.version
        return None

    def record_version(
        self,
        owner: str,
        repo: str,
        provider_id: str,
        sha: str,
        branch: str,
        version: str,
    ) -> None:
        """Record the version for a push, replacing any earlier entry."""
        tracked = self.load()
        tracked.versions = [
            entry
            for entry in tracked.versions
            if not entry.matches(owner, repo, provider_id, sha, branch)
        ]
        tracked.versions.append(
            TrackedVersion(
                owner=owner,
                repo=repo,
                provider_id=provider_id,
                sha=sha,
                branch=branch,
                version=version,
            )
        )
        self.save(tracked)
        self._log.info("tracked_version_recorded", repo=f"{owner}/{repo}", sha=sha, version=version)
