"""Input models for mdtask MCP tools."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mdtask.enums import ResponseFormat, TaskStatus

_STATUS_HELP = "Task status: TODO, WIP, WAIT, SCHE or DONE"


def _check_status(v: str | None) -> str | None:
    if not v:
        return v
    status = TaskStatus.parse(v)
    if status is None:
        raise ValueError(f"Unknown status '{v}'. {_STATUS_HELP}")
    return status.value


def _check_single_line(v: str | None, field: str) -> str | None:
    if v is not None and ("\n" in v or "\r" in v):
        raise ValueError(f"{field} cannot contain newlines")
    return v


# ============================================================================
# Query Input Models
# ============================================================================


class ListTasksInput(BaseModel):
    """Input model for listing tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    status: str | None = Field(default=None, description=f"Filter by status. {_STATUS_HELP}")
    include_archived: bool = Field(default=False, description="Include archived tasks")
    limit: int | None = Field(default=50, description="Maximum number of tasks to return", ge=1, le=500)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str | None) -> str | None:
        return _check_status(v)


class GetTaskInput(BaseModel):
    """Input model for getting a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID, e.g. 'task/20250101120000'", min_length=1)
    include_subtasks: bool = Field(default=True, description="List the task's direct subtasks")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class SearchTasksInput(BaseModel):
    """Input model for full-text search."""

    model_config = ConfigDict(str_strip_whitespace=True)

    query: str = Field(
        ...,
        description="Case-insensitive text matched against title, description, content and tags",
        min_length=1,
    )
    include_archived: bool = Field(default=False, description="Include archived tasks")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class SearchByTagsInput(BaseModel):
    """Input model for tag-combination search."""

    model_config = ConfigDict(str_strip_whitespace=True)

    include_tags: list[str] = Field(default_factory=list, description="Tags a task must carry")
    exclude_tags: list[str] = Field(default_factory=list, description="Tags that exclude a task")
    or_mode: bool = Field(
        default=False, description="Match tasks with ANY include tag instead of ALL of them"
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class ListRemindersInput(BaseModel):
    """Input model for listing reminders."""

    model_config = ConfigDict(str_strip_whitespace=True)

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class StatisticsInput(BaseModel):
    """Input model for task statistics."""

    model_config = ConfigDict(str_strip_whitespace=True)

    period: str = Field(default="day", description="Activity window: 'day', 'week' or 'month'")
    reference_date: date | None = Field(
        default=None, description="Reference date (YYYY-MM-DD); defaults to today"
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )

    @field_validator("period")
    @classmethod
    def validate_period(cls, v: str) -> str:
        v = v.lower()
        if v not in ("day", "week", "month"):
            raise ValueError("period must be 'day', 'week' or 'month'")
        return v


# ============================================================================
# Mutation Input Models
# ============================================================================


class CreateTaskInput(BaseModel):
    """Input model for creating a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., description="Task title (single line, required)", min_length=1, max_length=500)
    description: str = Field(default="", description="One-line description")
    content: str = Field(default="", description="Markdown body of the task")
    status: str | None = Field(default=None, description=f"Initial status. {_STATUS_HELP}")
    tags: list[str] = Field(default_factory=list, description="Additional tags", max_length=50)
    deadline: date | None = Field(default=None, description="Deadline (YYYY-MM-DD)")
    reminder: datetime | None = Field(default=None, description="Reminder time (YYYY-MM-DDTHH:MM)")
    wait_reason: str | None = Field(default=None, description="What the task is waiting for")
    parent_id: str | None = Field(default=None, description="ID of the parent task, making this a subtask")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return _check_single_line(v, "Title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _check_single_line(v, "Description")

    @field_validator("wait_reason")
    @classmethod
    def validate_wait_reason(cls, v: str | None) -> str | None:
        return _check_single_line(v, "Wait reason")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str | None) -> str | None:
        return _check_status(v)


class UpdateTaskInput(BaseModel):
    """Input model for updating a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID to update", min_length=1)
    title: str | None = Field(default=None, description="New title")
    description: str | None = Field(default=None, description="New description")
    status: str | None = Field(default=None, description=f"New status. {_STATUS_HELP}")
    content: str | None = Field(default=None, description="New Markdown body")
    add_tags: list[str] | None = Field(default=None, description="Tags to add")
    remove_tags: list[str] | None = Field(default=None, description="Tags to remove")
    deadline: str | None = Field(
        default=None, description="New deadline (YYYY-MM-DD); empty string removes it"
    )
    reminder: str | None = Field(
        default=None, description="New reminder (YYYY-MM-DDTHH:MM); empty string removes it"
    )
    wait_reason: str | None = Field(
        default=None, description="What the task is waiting for; empty string removes it"
    )

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str | None) -> str | None:
        return _check_status(v)

    @field_validator("deadline")
    @classmethod
    def validate_deadline(cls, v: str | None) -> str | None:
        if v:
            date.fromisoformat(v)
        return v

    @field_validator("reminder")
    @classmethod
    def validate_reminder(cls, v: str | None) -> str | None:
        if v:
            datetime.fromisoformat(v)
        return v


class TaskIdInput(BaseModel):
    """Input model for tools that act on a single task ID."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task ID", min_length=1)
