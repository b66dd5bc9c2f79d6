"""Data models for Helm operations.

Typed dataclasses for command options, releases and command results.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

# Option entries as they appear in configuration: a bare flag name or a
# single-key mapping of argument name to value.
RawOption = str | Mapping[str, str]


class Operation(StrEnum):
    """Release operation requested by a deploy goal."""

    INSTALL = "install"
    UPGRADE = "upgrade"
    INSTALL_OR_UPGRADE = "installOrUpgrade"


@dataclass(frozen=True)
class Flag:
    """A bare command-line flag, rendered as ``--<name>``."""

    name: str


@dataclass(frozen=True)
class KeyValue:
    """A command-line argument with a value, rendered as ``--<key> <value>``."""

    key: str
    value: str


HelmOption = Flag | KeyValue


def parse_option(raw: RawOption | HelmOption) -> HelmOption:
    """Convert a configuration option entry into a tagged option.

    Args:
        raw: Bare flag string, single-key mapping, or an already parsed option.

    Returns:
        The corresponding Flag or KeyValue.

    Raises:
        ValueError: If a mapping does not hold exactly one key.
        TypeError: If the entry is neither a string nor a mapping.
    """
    if isinstance(raw, (Flag, KeyValue)):
        return raw
    if isinstance(raw, str):
        return Flag(raw)
    if isinstance(raw, Mapping):
        if len(raw) != 1:
            raise ValueError(f"option mappings must hold exactly one key, got {sorted(raw)}")
        key, value = next(iter(raw.items()))
        return KeyValue(str(key), str(value))
    raise TypeError(f"unsupported option entry: {raw!r}")


def parse_options(raw: Iterable[RawOption | HelmOption] | None) -> list[HelmOption]:
    """Convert an option list, treating None as empty."""
    return [parse_option(entry) for entry in raw or ()]


@dataclass
class HelmRelease:
    """An entry from ``helm list --output json``."""

    name: str
    revision: int
    updated: str
    status: str
    chart: str
    app_version: str
    namespace: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> HelmRelease:
        """Create a HelmRelease from a ``helm list`` entry.

        Accepts the capitalised keys of helm 2 (``Name``, ``AppVersion``)
        as well as the snake_case keys of helm 3 (``name``, ``app_version``).
        """

        def field(capitalised: str, snake: str, default: Any = "") -> Any:
            return data.get(capitalised, data.get(snake, default))

        return cls(
            name=str(field("Name", "name")),
            revision=int(field("Revision", "revision", 0)),
            updated=str(field("Updated", "updated")),
            status=str(field("Status", "status")),
            chart=str(field("Chart", "chart")),
            app_version=str(field("AppVersion", "app_version")),
            namespace=str(field("Namespace", "namespace")),
        )

    @property
    def is_failed(self) -> bool:
        """Whether helm reports this release as FAILED."""
        return self.status.upper() == "FAILED"


@dataclass
class HelmCommandResult:
    """Result from a completed helm command."""

    exit_code: int
    stdout: str
    stderr: str = ""

    @property
    def success(self) -> bool:
        """Whether the command exited with status zero."""
        return self.exit_code == 0
