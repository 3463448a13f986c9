"""MCP tool definitions for mdtask."""

# Import all tools to register them with the MCP server
from mdtask.tools.core import (
    active_tasks_resource,
    archive_task,
    create_task,
    get_statistics,
    get_subtasks,
    get_task,
    list_reminders,
    list_tasks,
    search_tasks,
    search_tasks_by_tags,
    statistics_resource,
    unarchive_task,
    update_task,
)

__all__ = [
    # Tools
    "list_tasks",
    "get_task",
    "create_task",
    "update_task",
    "search_tasks",
    "search_tasks_by_tags",
    "archive_task",
    "unarchive_task",
    "get_subtasks",
    "get_statistics",
    "list_reminders",
    # Resources
    "active_tasks_resource",
    "statistics_resource",
]
