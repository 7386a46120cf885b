"""tasksync: session-aware client and sync engine for a personal task server."""

__version__ = "0.1.0"
