"""Pydantic models for mdtask."""

from mdtask.models.inputs import (
    CreateTaskInput,
    GetTaskInput,
    ListRemindersInput,
    ListTasksInput,
    SearchByTagsInput,
    SearchTasksInput,
    StatisticsInput,
    TaskIdInput,
    UpdateTaskInput,
)
from mdtask.models.params import CreateTaskParams, UpdateTaskParams
from mdtask.models.stats import ActivityCounts, DeadlineCounts, ReminderInfo, TaskStats
from mdtask.models.task import Task

__all__ = [
    # Domain model
    "Task",
    # Service parameters
    "CreateTaskParams",
    "UpdateTaskParams",
    # Statistics
    "ActivityCounts",
    "DeadlineCounts",
    "TaskStats",
    "ReminderInfo",
    # Tool input models
    "ListTasksInput",
    "GetTaskInput",
    "SearchTasksInput",
    "SearchByTagsInput",
    "ListRemindersInput",
    "StatisticsInput",
    "CreateTaskInput",
    "UpdateTaskInput",
    "TaskIdInput",
]
