"""MCP tool and resource definitions for mdtask."""

import json
from datetime import date, datetime

from mcp.types import ToolAnnotations

from mdtask.enums import ResponseFormat, TaskStatus
from mdtask.errors import MdtaskError, is_not_found
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
from mdtask.server import get_service, mcp
from mdtask.service import stats_range
from mdtask.tags import add_tag, remove_tag
from mdtask.utils.formatters import (
    _format_reminders_markdown,
    _format_stats_markdown,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks,
    _format_tasks_by_status,
)


def _error(e: MdtaskError) -> str:
    """Render a core error as tool output."""
    message = f"Error: {e}"
    if is_not_found(e):
        message += "\nTip: Use list_tasks or search_tasks to find valid task IDs."
    return message


@mcp.tool(
    name="list_tasks",
    annotations=ToolAnnotations(
        title="List Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def list_tasks(params: ListTasksInput) -> str:
    """
    List tasks, optionally filtered by status.

    USE THIS WHEN:
    - Getting an overview of open work
    - Finding all tasks in one status (e.g. everything in WIP)

    DO NOT USE WHEN:
    - You have a specific task ID → use get_task instead
    - You are looking for text → use search_tasks instead
    - You are filtering by tags → use search_tasks_by_tags instead

    Args:
        params: ListTasksInput containing status, include_archived, limit and response_format

    Returns:
        Formatted list of tasks (markdown, concise or JSON)

    Examples:
        - Active tasks: params with no arguments
        - Work in progress: params with status="WIP"
        - Everything including archived: params with include_archived=True
    """
    service = get_service()
    try:
        if params.status:
            tasks = service.repo.find_by_status(TaskStatus(params.status))
        else:
            tasks = service.repo.find_all()
    except MdtaskError as e:
        return _error(e)

    if not params.include_archived:
        tasks = [t for t in tasks if not t.is_archived()]

    total_count = len(tasks)
    if params.limit and len(tasks) > params.limit:
        tasks = tasks[: params.limit]

    title = "Tasks"
    if params.status:
        title = f"status:{params.status}"
    return _format_tasks(tasks, params.response_format, title, total=total_count)


@mcp.tool(
    name="get_task",
    annotations=ToolAnnotations(
        title="Get Task Details",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def get_task(params: GetTaskInput) -> str:
    """
    Retrieve full details for a single task, including its Markdown body.

    Args:
        params: GetTaskInput containing task_id, include_subtasks and response_format

    Returns:
        Detailed task information (markdown, concise or JSON)

    Examples:
        - params with task_id="task/20250101120000"
    """
    service = get_service()
    try:
        if params.include_subtasks:
            task, subtasks = service.get_task_with_subtasks(params.task_id)
        else:
            task, subtasks = service.repo.find_by_id(params.task_id), []
    except MdtaskError as e:
        return _error(e)

    if params.response_format == ResponseFormat.JSON:
        data = task.model_dump(mode="json")
        if params.include_subtasks:
            data["subtasks"] = [s.id for s in subtasks]
        return json.dumps(data, indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        return _format_task_concise(task)

    lines = [_format_task_markdown(task, include_content=True)]
    if subtasks:
        lines.append("")
        lines.append(f"**Subtasks ({len(subtasks)}):**")
        lines.extend(f"  - {_format_task_concise(s)}" for s in subtasks)
    return "\n".join(lines)


@mcp.tool(
    name="create_task",
    annotations=ToolAnnotations(
        title="Create Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def create_task(params: CreateTaskInput) -> str:
    """
    Create a new task as a Markdown file in the first task directory.

    Configured defaults apply: title prefix, description/content templates,
    default tags and default status. A subtask inherits its parent's status
    when no status is given.

    Args:
        params: CreateTaskInput containing title and optional attributes

    Returns:
        Confirmation message with the created task ID and file path

    Examples:
        - Simple task: params with title="Buy groceries"
        - With deadline: params with title="Submit report", deadline="2025-01-31"
        - Subtask: params with title="Draft outline", parent_id="task/20250101120000"
        - Waiting: params with title="Deploy", wait_reason="security review"
    """
    try:
        task, path = get_service().create_task(
            CreateTaskParams(
                title=params.title,
                description=params.description,
                content=params.content,
                tags=params.tags,
                status=params.status or "",
                deadline=params.deadline,
                reminder=params.reminder,
                wait_reason=params.wait_reason or "",
                parent_id=params.parent_id or "",
            )
        )
    except MdtaskError as e:
        return _error(e)

    return f"Task created successfully.\nID: {task.id}\nTitle: {task.title}\nFile: {path}"


@mcp.tool(
    name="update_task",
    annotations=ToolAnnotations(
        title="Update Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def update_task(params: UpdateTaskInput) -> str:
    """
    Update fields of an existing task.

    Only provided fields change. Pass an empty string for deadline, reminder
    or wait_reason to remove it.

    Args:
        params: UpdateTaskInput containing task_id and the fields to change

    Returns:
        Confirmation message

    Examples:
        - Start work: params with task_id="task/...", status="WIP"
        - Retag: params with task_id="task/...", add_tags=["urgent"], remove_tags=["later"]
        - Drop deadline: params with task_id="task/...", deadline=""
    """
    service = get_service()
    try:
        tags = None
        if params.add_tags or params.remove_tags:
            current = service.repo.find_by_id(params.task_id)
            tags = list(current.user_tags)
            for tag in params.remove_tags or []:
                tags = remove_tag(tags, tag)
            for tag in params.add_tags or []:
                tags = add_tag(tags, tag)

        update = UpdateTaskParams(
            title=params.title,
            description=params.description,
            status=params.status,
            content=params.content,
            tags=tags,
            clear_deadline=params.deadline == "",
            deadline=date.fromisoformat(params.deadline) if params.deadline else None,
            clear_reminder=params.reminder == "",
            reminder=datetime.fromisoformat(params.reminder) if params.reminder else None,
            wait_reason=params.wait_reason,
        )
        task = service.update_task(params.task_id, update)
    except MdtaskError as e:
        return _error(e)

    return f"Task updated successfully.\nID: {task.id}\nTitle: {task.title}"


@mcp.tool(
    name="search_tasks",
    annotations=ToolAnnotations(
        title="Search Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def search_tasks(params: SearchTasksInput) -> str:
    """
    Case-insensitive text search over title, description, content and tags.

    Args:
        params: SearchTasksInput containing query, include_archived and response_format

    Returns:
        Matching tasks

    Examples:
        - params with query="login"
    """
    try:
        tasks = get_service().repo.search(params.query)
    except MdtaskError as e:
        return _error(e)

    if not params.include_archived:
        tasks = [t for t in tasks if not t.is_archived()]
    return _format_tasks(tasks, params.response_format, f"Tasks matching '{params.query}'")


@mcp.tool(
    name="search_tasks_by_tags",
    annotations=ToolAnnotations(
        title="Search Tasks by Tags",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def search_tasks_by_tags(params: SearchByTagsInput) -> str:
    """
    Find active tasks by tag combinations.

    Tags match exactly, ignoring case. Archived tasks are never returned.

    Args:
        params: SearchByTagsInput containing include_tags, exclude_tags, or_mode and response_format

    Returns:
        Matching tasks

    Examples:
        - Bugs with high priority: include_tags=["type/bug", "priority/high"]
        - Bugs or features: include_tags=["type/bug", "type/feature"], or_mode=True
        - Everything not blocked: exclude_tags=["blocked"]
    """
    try:
        tasks = get_service().repo.search_by_tags(params.include_tags, params.exclude_tags, params.or_mode)
    except MdtaskError as e:
        return _error(e)

    joiner = " OR " if params.or_mode else " AND "
    title = joiner.join(params.include_tags) or "Tasks"
    if params.exclude_tags:
        title += f" (excluding {', '.join(params.exclude_tags)})"
    return _format_tasks(tasks, params.response_format, title)


@mcp.tool(
    name="archive_task",
    annotations=ToolAnnotations(
        title="Archive Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def archive_task(params: TaskIdInput) -> str:
    """
    Archive a task together with all of its subtasks.

    Archived tasks stay on disk and can be restored with unarchive_task.

    Args:
        params: TaskIdInput containing the task_id to archive

    Returns:
        Confirmation message
    """
    try:
        task = get_service().archive_task(params.task_id)
    except MdtaskError as e:
        return _error(e)

    return f"Task archived successfully.\nID: {task.id}\nTitle: {task.title}"


@mcp.tool(
    name="unarchive_task",
    annotations=ToolAnnotations(
        title="Unarchive Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def unarchive_task(params: TaskIdInput) -> str:
    """
    Restore an archived task. Fails while the task's parent is archived.

    Args:
        params: TaskIdInput containing the task_id to restore

    Returns:
        Confirmation message
    """
    try:
        task = get_service().unarchive_task(params.task_id)
    except MdtaskError as e:
        return _error(e)

    return f"Task unarchived successfully.\nID: {task.id}\nTitle: {task.title}"


@mcp.tool(
    name="get_subtasks",
    annotations=ToolAnnotations(
        title="List Subtasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def get_subtasks(params: TaskIdInput) -> str:
    """
    List the direct subtasks of a task (archived ones included).

    Args:
        params: TaskIdInput containing the parent task_id

    Returns:
        Subtasks in concise format
    """
    service = get_service()
    try:
        parent, subtasks = service.get_task_with_subtasks(params.task_id)
    except MdtaskError as e:
        return _error(e)

    return _format_tasks(subtasks, ResponseFormat.CONCISE, f"subtasks of {parent.id}")


@mcp.tool(
    name="get_statistics",
    annotations=ToolAnnotations(
        title="Task Statistics",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def get_statistics(params: StatisticsInput) -> str:
    """
    Summarize tasks: counts by status, activity in a period, deadlines.

    Args:
        params: StatisticsInput containing period, reference_date and response_format

    Returns:
        Statistics (markdown or JSON)

    Examples:
        - Today: params with no arguments
        - This week: params with period="week"
    """
    service = get_service()
    reference = params.reference_date or date.today()
    try:
        start, end = stats_range(params.period, reference)
        stats = service.calculate_stats(start, end)
    except MdtaskError as e:
        return _error(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(stats.model_dump(mode="json"), indent=2)
    return _format_stats_markdown(stats)


@mcp.tool(
    name="list_reminders",
    annotations=ToolAnnotations(
        title="List Reminders",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def list_reminders(params: ListRemindersInput) -> str:
    """
    List active tasks that have a reminder, marked overdue, due soon or upcoming.

    Args:
        params: ListRemindersInput containing response_format

    Returns:
        Reminders (markdown or JSON)
    """
    try:
        reminders = get_service().find_reminders()
    except MdtaskError as e:
        return _error(e)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps([r.model_dump(mode="json") for r in reminders], indent=2)
    return _format_reminders_markdown(reminders)


@mcp.resource(
    "mdtask://tasks",
    name="Active Tasks",
    description="All active tasks grouped by status",
    mime_type="text/markdown",
)
def active_tasks_resource() -> str:
    return _format_tasks_by_status(get_service().repo.find_active())


@mcp.resource(
    "mdtask://statistics",
    name="Task Statistics",
    description="Task counts by status for today",
    mime_type="application/json",
)
def statistics_resource() -> str:
    start, end = stats_range("day", date.today())
    stats = get_service().calculate_stats(start, end)
    return json.dumps(stats.model_dump(mode="json"), indent=2)
