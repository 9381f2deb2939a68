"""histdiff — compare historical file snapshots from a git history."""

__version__ = "0.1.0"
