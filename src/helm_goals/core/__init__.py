"""Core configuration and goal framework."""
