"""Utility functions for mdtask."""

from mdtask.utils.formatters import (
    _format_reminders_markdown,
    _format_stats_markdown,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks,
    _format_tasks_by_status,
    _format_tasks_concise,
    _format_tasks_markdown,
)

__all__ = [
    "_format_task_concise",
    "_format_tasks_concise",
    "_format_task_markdown",
    "_format_tasks_markdown",
    "_format_tasks_by_status",
    "_format_tasks",
    "_format_stats_markdown",
    "_format_reminders_markdown",
]
