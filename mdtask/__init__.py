"""
mdtask: tasks stored as Markdown files with YAML front matter.

Task attributes live in the ``tags`` list (``mdtask/status/WIP``,
``mdtask/deadline/2025-01-31`` and so on), so the files stay readable by any
Markdown tool. This package provides the file codec, a directory-backed
repository, the task service and an MCP server exposing them.
"""

# Re-export enums
from mdtask.enums import ReminderState, ResponseFormat, TaskStatus

# Re-export errors
from mdtask.errors import (
    ConflictError,
    DuplicateError,
    ErrorKind,
    FrontMatterError,
    InternalError,
    InvalidInputError,
    MdtaskError,
    NotFoundError,
    PermissionDeniedError,
    is_conflict,
    is_duplicate,
    is_internal,
    is_invalid_input,
    is_not_found,
    is_permission,
)

# Re-export models
from mdtask.models import (
    ActivityCounts,
    CreateTaskInput,
    CreateTaskParams,
    DeadlineCounts,
    GetTaskInput,
    ListRemindersInput,
    ListTasksInput,
    ReminderInfo,
    SearchByTagsInput,
    SearchTasksInput,
    StatisticsInput,
    Task,
    TaskIdInput,
    TaskStats,
    UpdateTaskInput,
    UpdateTaskParams,
)

# Re-export core components
from mdtask.config import Config, MCPConfig, TaskConfig, find_config_file, load_config, load_from_default_location
from mdtask.ids import TaskIdGenerator, generate_task_id
from mdtask.markdown import parse_task_file, write_task_file
from mdtask.repository import Repository, TaskRepository
from mdtask.service import TaskService, stats_range

# Re-export MCP server instance
from mdtask.server import get_service, mcp, set_service

# Re-export tools
from mdtask.tools import (
    archive_task,
    create_task,
    get_statistics,
    get_subtasks,
    get_task,
    list_reminders,
    list_tasks,
    search_tasks,
    search_tasks_by_tags,
    unarchive_task,
    update_task,
)

__all__ = [
    # Enums
    "TaskStatus",
    "ResponseFormat",
    "ReminderState",
    # Errors
    "ErrorKind",
    "MdtaskError",
    "NotFoundError",
    "InvalidInputError",
    "FrontMatterError",
    "InternalError",
    "DuplicateError",
    "PermissionDeniedError",
    "ConflictError",
    "is_not_found",
    "is_invalid_input",
    "is_internal",
    "is_duplicate",
    "is_permission",
    "is_conflict",
    # Models
    "Task",
    "CreateTaskParams",
    "UpdateTaskParams",
    "TaskStats",
    "ActivityCounts",
    "DeadlineCounts",
    "ReminderInfo",
    # Input models
    "ListTasksInput",
    "GetTaskInput",
    "SearchTasksInput",
    "SearchByTagsInput",
    "ListRemindersInput",
    "StatisticsInput",
    "CreateTaskInput",
    "UpdateTaskInput",
    "TaskIdInput",
    # Core components
    "Config",
    "TaskConfig",
    "MCPConfig",
    "load_config",
    "find_config_file",
    "load_from_default_location",
    "TaskIdGenerator",
    "generate_task_id",
    "parse_task_file",
    "write_task_file",
    "Repository",
    "TaskRepository",
    "TaskService",
    "stats_range",
    # MCP server
    "mcp",
    "get_service",
    "set_service",
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
]
