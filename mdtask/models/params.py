"""Parameter models for the task service."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateTaskParams(BaseModel):
    """Parameters for creating a task. Empty strings mean "not given"."""

    title: str
    description: str = ""
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    status: str = ""
    deadline: date | None = None
    reminder: datetime | None = None
    wait_reason: str = ""
    parent_id: str = ""


class UpdateTaskParams(BaseModel):
    """
    Parameters for updating a task.

    Only fields that are not None are applied. ``tags`` replaces the user tags
    and keeps every ``mdtask`` system tag. ``clear_deadline`` and
    ``clear_reminder`` take precedence over a new value.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    status: str | None = None
    tags: list[str] | None = None
    content: str | None = None
    deadline: date | None = None
    clear_deadline: bool = False
    reminder: datetime | None = None
    clear_reminder: bool = False
    wait_reason: str | None = None
