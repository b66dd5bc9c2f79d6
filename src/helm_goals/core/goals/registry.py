"""Goal table: registered goals looked up and run by name."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from helm_goals.core.goals.base import Goal, GoalInvocation, GoalResult

logger = structlog.get_logger()


class GoalRegistry:
    """Holds the goals an orchestrator can schedule.

    Example:
        >>> registry = GoalRegistry()
        >>> registry.register(helm_package(config, HelmPackageRegistration()))
        >>> result = registry.run("helm-package", invocation)
    """

    def __init__(self) -> None:
        self._goals: dict[str, Goal] = {}

    def register(self, goal: Goal) -> Goal:
        """Add a goal to the table.

        Raises:
            ValueError: If a goal with the same name is already registered.
        """
        if goal.name in self._goals:
            raise ValueError(f"goal '{goal.name}' is already registered")
        self._goals[goal.name] = goal
        logger.debug("goal_registered", goal=goal.name)
        return goal

    def get(self, name: str) -> Goal | None:
        """Get a registered goal by name."""
        return self._goals.get(name)

    def names(self) -> list[str]:
        """Names of registered goals, in registration order."""
        return list(self._goals)

    def run(self, name: str, invocation: GoalInvocation) -> GoalResult:
        """Execute a registered goal.

        Raises:
            KeyError: If no goal has that name.
        """
        goal = self._goals.get(name)
        if goal is None:
            raise KeyError(f"goal '{name}' is not registered")
        return goal.execute(invocation)

    def __contains__(self, name: object) -> bool:
        return name in self._goals

    def __len__(self) -> int:
        return len(self._goals)
