"""Task service: creation defaults, validation and archive cascades.

The service sits between callers (the MCP tools) and the repository. It owns
every policy decision; the repository only stores and finds files.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from pathlib import Path

from mdtask.config import Config
from mdtask.constants import TAG_PREFIX
from mdtask.enums import ReminderState, TaskStatus
from mdtask.errors import InvalidInputError, NotFoundError
from mdtask.models.params import CreateTaskParams, UpdateTaskParams
from mdtask.models.stats import ReminderInfo, TaskStats
from mdtask.models.task import Task
from mdtask.repository import Repository
from mdtask.tags import is_system_tag

logger = logging.getLogger(__name__)

UPCOMING_DEADLINE_WINDOW = timedelta(days=7)
DUE_SOON_REMINDER_WINDOW = timedelta(hours=24)


def validate_title(title: str) -> None:
    """
    Raises:
        InvalidInputError: If the title is blank or spans several lines
    """
    if "\n" in title or "\r" in title:
        raise InvalidInputError("title", title, "title cannot contain newlines")
    if not title.strip():
        raise InvalidInputError("title", title, "title cannot be empty")


def validate_description(description: str) -> None:
    if "\n" in description or "\r" in description:
        raise InvalidInputError("description", description, "description cannot contain newlines")


def parse_status(value: str) -> TaskStatus:
    """
    Raises:
        InvalidInputError: If ``value`` is not a known status
    """
    status = TaskStatus.parse(value)
    if status is None:
        choices = ", ".join(s.value for s in TaskStatus)
        raise InvalidInputError("status", value, f"expected one of {choices}")
    return status


def stats_range(period: str, today: date) -> tuple[date, date]:
    """
    Return the ``[start, end)`` window for a statistics period.

    Args:
        period: ``day``, ``week`` (Monday to Sunday) or ``month``
        today: Reference date
    """
    if period == "day":
        return today, today + timedelta(days=1)
    if period == "week":
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=7)
    if period == "month":
        start = today.replace(day=1)
        following = (start + timedelta(days=32)).replace(day=1)
        return start, following
    raise InvalidInputError("period", period, "expected day, week or month")


class TaskService:
    """
    Business operations on tasks.

    Args:
        repo: Task storage
        config: Creation defaults come from ``config.task``
        clock: Current time for statistics and reminders
    """

    def __init__(
        self,
        repo: Repository,
        config: Config | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repo = repo
        self.config = config or Config()
        self._clock = clock

    def create_task(self, params: CreateTaskParams) -> tuple[Task, Path]:
        """
        Create a task from caller input and configured defaults.

        Args:
            params: Caller-supplied fields

        Returns:
            Tuple of (created task, file path)

        Raises:
            InvalidInputError: Bad title, description or status
            NotFoundError: ``parent_id`` names a task that does not exist
        """
        defaults = self.config.task

        title = defaults.title_prefix + params.title if defaults.title_prefix else params.title
        validate_title(title)

        description = params.description or defaults.description_template
        validate_description(description)

        content = params.content or defaults.content_template

        status = parse_status(params.status or defaults.default_status or TaskStatus.TODO.value)

        now = self._clock()
        task = Task(
            title=title,
            description=description,
            content=content,
            created=now,
            updated=now,
            tags=[TAG_PREFIX, *defaults.default_tags, *params.tags],
        )
        task.set_status(status)
        # Attribute tags passed in ``tags`` stand unless a field overrides them.
        if params.deadline is not None:
            task.set_deadline(params.deadline)
        if params.reminder is not None:
            task.set_reminder(params.reminder)
        if params.wait_reason:
            task.set_wait_reason(params.wait_reason)

        if params.parent_id:
            try:
                parent = self.repo.find_by_id(params.parent_id)
            except NotFoundError:
                raise NotFoundError("parent task", params.parent_id) from None
            task.set_parent_id(parent.id)
            if not params.status and status == TaskStatus.TODO:
                task.set_status(parent.status)

        path = self.repo.create(task)
        return task, path

    def update_task(self, task_id: str, params: UpdateTaskParams) -> Task:
        """
        Apply the fields set in ``params`` to an existing task.

        Raises:
            NotFoundError: If the task does not exist
            InvalidInputError: Bad title, description or status
        """
        task = self.repo.find_by_id(task_id)

        if params.title is not None:
            validate_title(params.title)
            task.title = params.title

        if params.description is not None:
            validate_description(params.description)
            task.description = params.description

        if params.status is not None:
            task.set_status(parse_status(params.status))

        if params.tags is not None:
            # Attribute tags are fields of the task; unknown mdtask/* tags survive too.
            kept = [tag for tag in task.user_tags if is_system_tag(tag)]
            task.user_tags = kept + [tag for tag in params.tags if not is_system_tag(tag)]

        if params.content is not None:
            task.content = params.content

        if params.clear_deadline:
            task.set_deadline(None)
        elif params.deadline is not None:
            task.set_deadline(params.deadline)

        if params.clear_reminder:
            task.set_reminder(None)
        elif params.reminder is not None:
            task.set_reminder(params.reminder)

        if params.wait_reason is not None:
            task.set_wait_reason(params.wait_reason)

        self.repo.update(task)
        return task

    def archive_task(self, task_id: str) -> Task:
        """
        Archive a task and, first, all of its descendants.

        Raises:
            NotFoundError: If the task does not exist
            InvalidInputError: If the task is already archived
        """
        task = self.repo.find_by_id(task_id)
        if task.is_archived():
            raise InvalidInputError("task", task_id, "already archived")

        self._archive_subtasks(task_id)

        task.archive()
        self.repo.update(task)
        logger.info("Archived task %s", task_id)
        return task

    def unarchive_task(self, task_id: str) -> Task:
        """
        Restore an archived task. Descendants stay archived.

        Raises:
            NotFoundError: If the task does not exist
            InvalidInputError: If the task is not archived, or its parent is
        """
        task = self.repo.find_by_id(task_id)
        if not task.is_archived():
            raise InvalidInputError("task", task_id, "not archived")

        if task.has_parent():
            try:
                parent = self.repo.find_by_id(task.parent_id)
            except NotFoundError:
                parent = None
            if parent is not None and parent.is_archived():
                raise InvalidInputError(
                    "task", task_id, f"cannot unarchive subtask while parent {parent.id} is archived"
                )

        task.unarchive()
        self.repo.update(task)
        logger.info("Unarchived task %s", task_id)
        return task

    def find_subtasks(self, parent_id: str) -> list[Task]:
        return [task for task in self.repo.find_all() if task.parent_id == parent_id]

    def get_task_with_subtasks(self, task_id: str) -> tuple[Task, list[Task]]:
        task = self.repo.find_by_id(task_id)
        return task, self.find_subtasks(task_id)

    def _archive_subtasks(self, parent_id: str) -> None:
        for subtask in self.find_subtasks(parent_id):
            if subtask.is_archived():
                continue
            self._archive_subtasks(subtask.id)
            subtask.archive()
            self.repo.update(subtask)
            logger.info("Archived subtask %s of %s", subtask.id, parent_id)

    def calculate_stats(self, start: date, end: date, now: datetime | None = None) -> TaskStats:
        """
        Summarize non-archived tasks.

        Activity counts use the window ``[start, end)``. A DONE task counts as
        completed when it was last updated inside the window.

        Args:
            start: First day of the window
            end: Day after the last day of the window
            now: Reference time for deadlines; defaults to the service clock
        """
        now = now or self._clock()
        window_start = datetime.combine(start, time.min)
        window_end = datetime.combine(end, time.min)

        stats = TaskStats(start=start, end=end)
        for task in self.repo.find_all():
            if task.is_archived():
                stats.archived += 1
                continue

            stats.total += 1
            stats.by_status[task.status] += 1

            updated_in_window = window_start <= task.updated < window_end
            if window_start <= task.created < window_end:
                stats.activity.created += 1
            if updated_in_window:
                stats.activity.updated += 1
                if task.status == TaskStatus.DONE:
                    stats.activity.completed += 1

            if task.deadline is not None:
                deadline = datetime.combine(task.deadline, time.min)
                if deadline < now:
                    stats.deadlines.overdue += 1
                elif deadline - now < UPCOMING_DEADLINE_WINDOW:
                    stats.deadlines.upcoming += 1
        return stats

    def find_reminders(self, now: datetime | None = None) -> list[ReminderInfo]:
        """List active tasks that have a reminder, classified against ``now``."""
        now = now or self._clock()
        reminders: list[ReminderInfo] = []
        for task in self.repo.find_active():
            if task.reminder is None:
                continue
            if task.reminder < now:
                state = ReminderState.OVERDUE
            elif task.reminder - now < DUE_SOON_REMINDER_WINDOW:
                state = ReminderState.DUE_SOON
            else:
                state = ReminderState.UPCOMING
            reminders.append(ReminderInfo(task=task, reminder=task.reminder, state=state))
        return reminders

    def due_reminders(self, now: datetime | None = None) -> list[Task]:
        """Active tasks whose reminder falls in the current minute."""
        now = (now or self._clock()).replace(second=0, microsecond=0)
        return [task for task in self.repo.find_active() if task.reminder == now]
