"""Goal records and the invocation context handed to goal executors.

A goal is a plain record of a name, display definition and executor
function. The executor receives a GoalInvocation describing the checked
out project and the push that triggered it, and returns a GoalResult.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from helm_goals.integrations.helm.exceptions import HelmGoalsError
from helm_goals.logging.config import get_logger, goal_log_context

logger = structlog.get_logger()

# Directories never searched when looking for project files.
IGNORED_DIRS = frozenset({".git", ".hg", ".svn", "node_modules"})


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GoalResult:
    """Outcome of a goal invocation.

    ``code`` is zero on success; failures carry a non-zero code and a
    message for the pipeline display.
    """

    code: int = 0
    message: str | None = None

    @property
    def success(self) -> bool:
        """Whether the goal succeeded."""
        return self.code == 0

    @classmethod
    def failure(cls, message: str, code: int = 1) -> GoalResult:
        """Create a failed result, coercing a zero code to 1."""
        return cls(code=code or 1, message=message)


SUCCESS = GoalResult()


# ---------------------------------------------------------------------------
# Invocation context
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GoalEvent:
    """The push a goal runs for."""

    owner: str
    repo: str
    provider_id: str = ""
    sha: str = ""
    branch: str = ""


class ProgressLog:
    """Human-readable progress lines for one goal invocation.

    Lines are kept for display and mirrored to the structured log.
    """

    def __init__(self, goal: str = "") -> None:
        self.lines: list[str] = []
        self._log = logger.bind(goal=goal) if goal else logger

    def write(self, message: str) -> None:
        """Record a progress line."""
        self.lines.append(message)
        self._log.info("goal_progress", message=message)

    def __str__(self) -> str:
        return "\n".join(self.lines)


@dataclass
class Project:
    """A checked out project working tree."""

    base_dir: Path

    def __post_init__(self) -> None:
        self.base_dir = Path(self.base_dir)

    def path(self, relative: str | Path) -> Path:
        """Absolute path of a project-relative path."""
        return self.base_dir / relative

    def has_file(self, relative: str | Path) -> bool:
        """Whether a regular file exists at the project-relative path."""
        return self.path(relative).is_file()

    def has_directory(self, relative: str | Path) -> bool:
        """Whether a directory exists at the project-relative path."""
        return self.path(relative).is_dir()

    def iter_files(self) -> Iterator[Path]:
        """Yield every file in the tree, skipping VCS metadata directories."""
        for path in self.base_dir.rglob("*"):
            relative = path.relative_to(self.base_dir)
            if any(part in IGNORED_DIRS for part in relative.parts):
                continue
            if path.is_file():
                yield path

    def find_files(self, pattern: re.Pattern[str]) -> list[Path]:
        """Find files whose name matches ``pattern``.

        Results are ordered shallowest first, then alphabetically, so the
        root-level match (if any) comes first.
        """
        matches = [p for p in self.iter_files() if pattern.fullmatch(p.name)]
        return sorted(matches, key=lambda p: (len(p.relative_to(self.base_dir).parts), str(p)))


@dataclass
class GoalInvocation:
    """Everything a goal executor needs for one run."""

    project: Project
    event: GoalEvent
    progress_log: ProgressLog = field(default_factory=ProgressLog)
    context: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


GoalExecutor = Callable[[GoalInvocation], GoalResult]
PushTest = Callable[[Project], bool]


@dataclass(frozen=True)
class GoalDefinition:
    """Display metadata for a goal."""

    unique_name: str
    display_name: str
    working_description: str
    completed_description: str
    failed_description: str
    waiting_for_approval_description: str = ""
    waiting_for_pre_approval_description: str = ""
    stopped_description: str = ""
    canceled_description: str = ""
    retry_feasible: bool = True

    @classmethod
    def for_action(cls, unique_name: str, action: str) -> GoalDefinition:
        """Build the standard set of descriptions for an action label."""
        return cls(
            unique_name=unique_name,
            display_name=f"Running: {action}",
            working_description=f"Working: {action}",
            completed_description=f"Completed: {action}",
            failed_description=f"Failed: {action}",
            waiting_for_approval_description=f"Waiting for approval: {action}",
            waiting_for_pre_approval_description=f"Waiting to start: {action}",
            stopped_description=f"Stopped: {action}",
            canceled_description=f"Cancelled: {action}",
        )


@dataclass(frozen=True)
class ProjectListener:
    """Callback run against the project before a goal executes."""

    name: str
    listener: Callable[[Project, GoalInvocation], None]
    push_test: PushTest | None = None


@dataclass
class Goal:
    """A named unit of pipeline work."""

    name: str
    definition: GoalDefinition
    executor: GoalExecutor
    listeners: list[ProjectListener] = field(default_factory=list)

    def with_project_listener(self, listener: ProjectListener) -> Goal:
        """Add a before-execution project listener."""
        self.listeners.append(listener)
        return self

    def execute(self, invocation: GoalInvocation) -> GoalResult:
        """Run listeners and the executor, converting goal errors to a result.

        Errors that are not HelmGoalsError propagate unchanged.
        """
        event = invocation.event
        log = get_logger(__name__, goal=self.name)
        log.info("goal_started", description=self.definition.working_description)

        try:
            with goal_log_context(self.name, event.owner, event.repo, event.sha, event.branch):
                for listener in self.listeners:
                    if listener.push_test is not None and not listener.push_test(invocation.project):
                        log.debug("project_listener_skipped", listener=listener.name)
                        continue
                    log.debug("running_project_listener", listener=listener.name)
                    listener.listener(invocation.project, invocation)

                result = self.executor(invocation)
        except HelmGoalsError as e:
            log.error("goal_failed", error=e.message, exit_code=e.exit_code)
            invocation.progress_log.write(e.message)
            return GoalResult.failure(e.message, code=e.exit_code or 1)

        if result.success:
            log.info("goal_completed", description=self.definition.completed_description)
        else:
            log.error("goal_failed", error=result.message, exit_code=result.code)
        return result
