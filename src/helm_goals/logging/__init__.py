"""Logging configuration for helm_goals."""

from helm_goals.logging.config import configure_logging, get_logger, goal_log_context

__all__ = ["configure_logging", "get_logger", "goal_log_context"]
