"""Helm chart packaging and deployment goals for delivery pipelines."""

from helm_goals.__version__ import __version__

__all__ = ["__version__"]
