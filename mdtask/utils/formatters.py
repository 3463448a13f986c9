"""Formatting utilities for task output."""

import json
from datetime import timedelta

from mdtask.constants import DATETIME_FORMAT, DATE_FORMAT
from mdtask.enums import ResponseFormat, TaskStatus
from mdtask.models.stats import ReminderInfo, TaskStats
from mdtask.models.task import Task

STATUS_ORDER = list(TaskStatus)


def _format_task_concise(task: Task) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "task/20250101120000 [WIP] Title (due:2025-01-31, parent:task/...)"
    """
    title = task.title[:60] if task.title else "Untitled"

    meta = []
    if task.deadline:
        meta.append(f"due:{task.deadline.strftime(DATE_FORMAT)}")
    if task.wait_reason:
        meta.append(f"waitfor:{task.wait_reason}")
    if task.parent_id:
        meta.append(f"parent:{task.parent_id}")
    if task.archived:
        meta.append("archived")

    line = f"{task.id} [{task.status.value}] {title}"
    if meta:
        return f"{line} ({', '.join(meta)})"
    return line


def _format_tasks_concise(tasks: list[Task], title: str | None = None) -> str:
    """
    Format a list of tasks in concise format.

    Output:
    2 task(s) | status:WIP
    task/20250101120000 [WIP] Write report
    task/20250101120005 [WIP] Review draft
    """
    if not tasks:
        return "0 tasks"

    header = f"{len(tasks)} task(s)"
    if title:
        header = f"{len(tasks)} task(s) | {title}"

    return "\n".join([header, *(_format_task_concise(task) for task in tasks)])


def _format_task_markdown(task: Task, include_content: bool = False) -> str:
    """Format a single task as markdown."""
    lines = [f"### [{task.status.value}] {task.title or 'Untitled'}", f"`{task.id}`"]

    if task.description:
        lines.append(task.description)

    details = []
    if task.deadline:
        details.append(f"**Deadline**: {task.deadline.strftime(DATE_FORMAT)}")
    if task.reminder:
        details.append(f"**Reminder**: {task.reminder.strftime(DATETIME_FORMAT)}")
    if task.wait_reason:
        details.append(f"**Waiting for**: {task.wait_reason}")
    if task.parent_id:
        details.append(f"**Parent**: {task.parent_id}")
    if task.user_tags:
        details.append(f"**Tags**: {', '.join(task.user_tags)}")
    if task.archived:
        details.append("**Archived**")

    if details:
        lines.append(" | ".join(details))

    lines.append(
        f"Created: {task.created.strftime(DATETIME_FORMAT)} | Updated: {task.updated.strftime(DATETIME_FORMAT)}"
    )

    if include_content and task.content:
        lines.extend(["", task.content.rstrip()])

    return "\n".join(lines)


def _format_tasks_markdown(tasks: list[Task], title: str = "Tasks") -> str:
    """Format a list of tasks as markdown."""
    if not tasks:
        return f"# {title}\n\nNo tasks found."

    lines = [f"# {title}", f"*{len(tasks)} task(s)*", ""]

    for task in tasks:
        lines.append(_format_task_markdown(task))
        lines.append("")

    return "\n".join(lines)


def _format_tasks_by_status(tasks: list[Task], title: str = "Active Tasks") -> str:
    """Format tasks as markdown sections, one per status."""
    lines = [f"# {title}", ""]
    for status in STATUS_ORDER:
        group = [task for task in tasks if task.status == status]
        if not group:
            continue
        lines.append(f"## {status.value} ({len(group)})")
        lines.append("")
        for task in group:
            lines.append(f"- **{task.title}** (`{task.id}`)")
            if task.description:
                lines.append(f"  {task.description}")
        lines.append("")
    return "\n".join(lines)


def _format_tasks(tasks: list[Task], fmt: ResponseFormat, title: str, total: int | None = None) -> str:
    """Render tasks in the requested response format."""
    if fmt == ResponseFormat.JSON:
        total = len(tasks) if total is None else total
        return json.dumps(
            {"total": total, "count": len(tasks), "tasks": [t.model_dump(mode="json") for t in tasks]},
            indent=2,
        )
    if fmt == ResponseFormat.CONCISE:
        return _format_tasks_concise(tasks, title)
    return _format_tasks_markdown(tasks, title)


def _format_stats_markdown(stats: TaskStats) -> str:
    """Format task statistics as markdown."""
    end = stats.end - timedelta(days=1)
    period = stats.start.strftime(DATE_FORMAT)
    if end != stats.start:
        period = f"{period} to {end.strftime(DATE_FORMAT)}"

    lines = [
        f"# Task Statistics ({period})",
        "",
        f"**Active tasks**: {stats.total} | **Archived**: {stats.archived}",
        "",
        "## By Status",
    ]
    for status in STATUS_ORDER:
        lines.append(f"- {status.value}: {stats.by_status.get(status, 0)}")
    lines.extend(
        [
            "",
            "## Activity",
            f"- Created: {stats.activity.created}",
            f"- Updated: {stats.activity.updated}",
            f"- Completed: {stats.activity.completed}",
            "",
            "## Deadlines",
            f"- Overdue: {stats.deadlines.overdue}",
            f"- Upcoming (7 days): {stats.deadlines.upcoming}",
        ]
    )
    return "\n".join(lines)


def _format_reminders_markdown(reminders: list[ReminderInfo]) -> str:
    if not reminders:
        return "# Reminders\n\nNo tasks with reminders found."

    labels = {"overdue": "Overdue", "due_soon": "Due soon", "upcoming": "Upcoming"}
    lines = ["# Reminders", f"*{len(reminders)} reminder(s)*", ""]
    for info in reminders:
        lines.append(f"- [{labels[info.state.value]}] **{info.task.title}** (`{info.task.id}`)")
        lines.append(f"  Reminder: {info.reminder.strftime(DATETIME_FORMAT)}")
    return "\n".join(lines)
