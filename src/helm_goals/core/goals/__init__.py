"""Goal records, invocation context and the goal table."""

from helm_goals.core.goals.base import (
    SUCCESS,
    Goal,
    GoalDefinition,
    GoalEvent,
    GoalInvocation,
    GoalResult,
    ProgressLog,
    Project,
    ProjectListener,
)
from helm_goals.core.goals.registry import GoalRegistry

__all__ = [
    "SUCCESS",
    "Goal",
    "GoalDefinition",
    "GoalEvent",
    "GoalInvocation",
    "GoalRegistry",
    "GoalResult",
    "ProgressLog",
    "Project",
    "ProjectListener",
]
