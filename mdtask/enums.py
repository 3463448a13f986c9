"""Enums for mdtask."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # One line per task
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class TaskStatus(str, Enum):
    """Task lifecycle status, stored as an ``mdtask/status/<STATUS>`` tag."""

    TODO = "TODO"
    WIP = "WIP"
    WAIT = "WAIT"
    SCHE = "SCHE"
    DONE = "DONE"

    @classmethod
    def parse(cls, raw: str | None) -> "TaskStatus | None":
        """Return the status named by ``raw`` (case-insensitive), or None if unknown."""
        if not raw:
            return None
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return None


class ReminderState(str, Enum):
    """Where a reminder falls relative to now."""

    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    UPCOMING = "upcoming"
