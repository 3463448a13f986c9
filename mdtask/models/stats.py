"""Output models for statistics and reminder queries."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from mdtask.enums import ReminderState, TaskStatus
from mdtask.models.task import Task


class ActivityCounts(BaseModel):
    created: int = 0
    updated: int = 0
    completed: int = 0


class DeadlineCounts(BaseModel):
    overdue: int = 0
    upcoming: int = 0


class TaskStats(BaseModel):
    """Counts over non-archived tasks for a date window ``[start, end)``."""

    start: date
    end: date
    total: int = 0
    archived: int = 0
    by_status: dict[TaskStatus, int] = Field(default_factory=lambda: {s: 0 for s in TaskStatus})
    activity: ActivityCounts = Field(default_factory=ActivityCounts)
    deadlines: DeadlineCounts = Field(default_factory=DeadlineCounts)


class ReminderInfo(BaseModel):
    """A task with a reminder and where that reminder falls relative to now."""

    task: Task
    reminder: datetime
    state: ReminderState
