"""Developer test runner entry points."""
