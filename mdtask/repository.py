"""File-backed task repository.

Every ``.md`` file under the configured root directories is a candidate
task. Files that do not parse, or parse but lack the ``mdtask`` marker tag,
are skipped. There is no index: each query walks the roots again.
"""

import logging
import os
from collections.abc import Callable, Iterator, Sequence
from datetime import datetime
from pathlib import Path
from typing import Protocol

from mdtask.constants import (
    MARKDOWN_EXTENSION,
    MAX_FILENAME_SUFFIX,
    MAX_LOOKUP_SUFFIX,
    STATUS_TAG_PREFIX,
    TASK_ID_PREFIX,
)
from mdtask.enums import TaskStatus
from mdtask.errors import FrontMatterError, InternalError, NotFoundError
from mdtask.ids import TaskIdGenerator, default_generator
from mdtask.markdown import parse_task_file, write_task_file
from mdtask.models.task import Task
from mdtask.tags import get_tag_value, has_tag_ci

logger = logging.getLogger(__name__)


class Repository(Protocol):
    """Storage operations the service layer and the MCP tools rely on."""

    def find_all(self) -> list[Task]: ...

    def find_by_id(self, task_id: str) -> Task: ...

    def find_by_id_with_path(self, task_id: str) -> tuple[Task, Path]: ...

    def create(self, task: Task) -> Path: ...

    def update(self, task: Task) -> None: ...

    def save(self, task: Task, file_path: str | Path) -> None: ...

    def find_by_status(self, status: TaskStatus) -> list[Task]: ...

    def find_active(self) -> list[Task]: ...

    def search(self, query: str) -> list[Task]: ...

    def search_by_tags(
        self, include_tags: Sequence[str], exclude_tags: Sequence[str], or_mode: bool = False
    ) -> list[Task]: ...


class TaskRepository:
    """
    Task collection backed by Markdown files in one or more root directories.

    New tasks are always written to the first root. Lookups search the roots
    in order.

    Args:
        root_paths: Directories to scan recursively
        id_generator: Source of new task IDs; defaults to the process-wide one
        clock: Returns the time stamped into ``updated`` on update
    """

    def __init__(
        self,
        root_paths: Sequence[str | Path],
        id_generator: TaskIdGenerator | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._root_paths = [Path(p) for p in root_paths]
        self._id_generator = id_generator or default_generator
        self._clock = clock

    @property
    def root_paths(self) -> list[Path]:
        return list(self._root_paths)

    # ---- low-level helpers ----

    @staticmethod
    def _raise_walk_error(err: OSError) -> None:
        raise InternalError(f"failed to walk directory {err.filename}") from err

    def _iter_markdown_files(self, root: Path) -> Iterator[Path]:
        """Yield ``.md`` files under ``root``: each directory's files sorted by name, then its subdirectories."""
        if not root.is_dir():
            raise InternalError(f"failed to walk directory {root}: not a directory")
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._raise_walk_error):
            dirnames.sort()
            for name in sorted(filenames):
                if name.endswith(MARKDOWN_EXTENSION):
                    yield Path(dirpath) / name

    def _load_task(self, path: Path) -> Task | None:
        """
        Read and parse one file.

        Returns:
            The parsed task, or None if the file is not a task document

        Raises:
            InternalError: If the file cannot be read
        """
        try:
            data = path.read_bytes()
        except OSError as e:
            raise InternalError(f"failed to read file {path}") from e

        try:
            return parse_task_file(data)
        except FrontMatterError as e:
            logger.debug("Skipping %s: %s", path, e)
            return None

    def _iter_tasks_with_paths(self) -> Iterator[tuple[Task, Path]]:
        for root in self._root_paths:
            for path in self._iter_markdown_files(root):
                task = self._load_task(path)
                if task is not None and task.is_managed_task():
                    yield task, path

    def _probe_by_filename(self, task_id: str) -> tuple[Task, Path] | None:
        """Check the files an ID would conventionally be stored under."""
        timestamp = task_id.removeprefix(TASK_ID_PREFIX)
        if not timestamp:
            return None
        names = [f"{timestamp}{MARKDOWN_EXTENSION}"]
        names.extend(f"{timestamp}_{i}{MARKDOWN_EXTENSION}" for i in range(1, MAX_LOOKUP_SUFFIX))
        for root in self._root_paths:
            for name in names:
                path = root / name
                if not path.is_file():
                    continue
                task = self._load_task(path)
                if task is not None and task.is_managed_task() and task.id == task_id:
                    return task, path
        return None

    # ---- public API ----

    def find_all(self) -> list[Task]:
        """
        Load every managed task under all roots.

        Raises:
            InternalError: If a root cannot be walked or a file cannot be read
        """
        return [task for task, _ in self._iter_tasks_with_paths()]

    def find_by_id(self, task_id: str) -> Task:
        for task in self.find_all():
            if task.id == task_id:
                return task
        raise NotFoundError("task", task_id)

    def find_by_id_with_path(self, task_id: str) -> tuple[Task, Path]:
        """
        Find a task and the file it lives in.

        Tries the conventional ``<timestamp>[_n].md`` names first and falls
        back to a full scan, so renamed files are still found.

        Raises:
            NotFoundError: If no managed task has this ID
        """
        found = self._probe_by_filename(task_id)
        if found is not None:
            return found

        for task, path in self._iter_tasks_with_paths():
            if task.id == task_id:
                return task, path
        raise NotFoundError("task", task_id)

    def save(self, task: Task, file_path: str | Path) -> None:
        """
        Serialize ``task`` to ``file_path``, creating parent directories.

        Raises:
            InternalError: If the directory or file cannot be written
        """
        path = Path(file_path)
        content = write_task_file(task)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InternalError(f"failed to create directory {path.parent}") from e

        try:
            path.write_bytes(content)
        except OSError as e:
            raise InternalError(f"failed to save file {path}") from e

    def create(self, task: Task) -> Path:
        """
        Persist a new task in the first root.

        Assigns an ID when the task has none and marks it as managed. If the
        file for the ID already exists, ``_1``, ``_2``, ... suffixes are tried
        and the task's ID is rewritten to match the chosen file.

        Args:
            task: Task to write; its ``id`` may be modified

        Returns:
            Path of the written file

        Raises:
            InternalError: If no root is configured, no free file name is
                found, or the file cannot be written
        """
        if not self._root_paths:
            raise InternalError("no task directories configured")

        if not task.id:
            task.id = self._id_generator.generate()
        task.managed = True

        timestamp = task.timestamp
        root = self._root_paths[0]
        file_path: Path | None = None
        for i in range(MAX_FILENAME_SUFFIX):
            if i == 0:
                candidate = root / f"{timestamp}{MARKDOWN_EXTENSION}"
            else:
                candidate = root / f"{timestamp}_{i}{MARKDOWN_EXTENSION}"
                task.id = f"{TASK_ID_PREFIX}{timestamp}_{i}"
            if not candidate.exists():
                file_path = candidate
                break

        if file_path is None:
            raise InternalError(
                f"no free file name for {TASK_ID_PREFIX}{timestamp} after {MAX_FILENAME_SUFFIX} attempts"
            )

        self.save(task, file_path)
        logger.info("Task created id=%s path=%s", task.id, file_path)
        return file_path

    def update(self, task: Task) -> None:
        """
        Overwrite the file a task was loaded from and stamp ``updated``.

        The file is located by the task's ID, so changing the ID through
        update is not supported.

        Raises:
            NotFoundError: If the task is no longer on disk
        """
        _, file_path = self.find_by_id_with_path(task.id)
        task.updated = self._clock()
        self.save(task, file_path)
        logger.info("Task updated id=%s path=%s", task.id, file_path)

    def find_by_status(self, status: TaskStatus) -> list[Task]:
        """Tasks whose stored status tag is ``status``. An unknown stored status matches nothing."""
        value = TaskStatus(status).value
        return [task for task in self.find_all() if get_tag_value(task.tags, STATUS_TAG_PREFIX) == value]

    def find_active(self) -> list[Task]:
        return [task for task in self.find_all() if not task.is_archived()]

    def search(self, query: str) -> list[Task]:
        """Case-insensitive substring search over title, description, content and tags."""
        query = query.lower()
        matched: list[Task] = []
        for task in self.find_all():
            fields = (task.title, task.description, task.content, *task.tags)
            if any(query in field.lower() for field in fields):
                matched.append(task)
        return matched

    def search_by_tags(
        self,
        include_tags: Sequence[str],
        exclude_tags: Sequence[str],
        or_mode: bool = False,
    ) -> list[Task]:
        """
        Filter active tasks by tag combinations.

        Tags are compared case-insensitively. Archived tasks and tasks carrying
        any of ``exclude_tags`` are dropped first.

        Args:
            include_tags: Required tags; empty keeps every remaining task
            exclude_tags: Tags that disqualify a task
            or_mode: Require at least one include tag instead of all of them
        """
        matched: list[Task] = []
        for task in self.find_all():
            if task.is_archived():
                continue
            tags = task.tags
            if any(has_tag_ci(tags, tag) for tag in exclude_tags):
                continue
            if not include_tags:
                matched.append(task)
                continue
            check = any if or_mode else all
            if check(has_tag_ci(tags, tag) for tag in include_tags):
                matched.append(task)
        return matched
