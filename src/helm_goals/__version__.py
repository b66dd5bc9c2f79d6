"""Version information for helm_goals."""

__version__ = "0.1.0"
