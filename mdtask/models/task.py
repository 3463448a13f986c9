"""Core task model for mdtask."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, computed_field, model_validator

from mdtask.constants import DEADLINE_TAG_PREFIX, REMINDER_TAG_PREFIX, STATUS_TAG_PREFIX, TASK_ID_PREFIX
from mdtask.enums import TaskStatus
from mdtask.tags import decode_tags, encode_tags


class Task(BaseModel):
    """
    A task stored as a Markdown file with YAML front matter.

    Attributes that the file format keeps as ``mdtask/...`` tags are typed
    fields here. Pass ``tags=[...]`` to the constructor to decode a raw tag
    list; read :attr:`tags` to get the encoded list back.
    """

    id: str = ""
    title: str = ""
    description: str = ""
    content: str = ""
    aliases: list[str] = Field(default_factory=list)
    created: datetime = Field(default_factory=datetime.now)
    updated: datetime = Field(default_factory=datetime.now)

    # Tag-encoded attributes
    managed: bool = True
    status: TaskStatus = TaskStatus.TODO
    archived: bool = False
    deadline: date | None = None
    reminder: datetime | None = None
    wait_reason: str = ""
    parent_id: str = ""
    user_tags: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _decode_tag_list(cls, data: Any) -> Any:
        if isinstance(data, dict) and "tags" in data:
            data = dict(data)
            raw_tags = data.pop("tags") or []
            for key, value in decode_tags(list(raw_tags)).items():
                data.setdefault(key, value)
        return data

    @computed_field  # type: ignore[prop-decorator]
    @property
    def tags(self) -> list[str]:
        """Attributes encoded as the tag list written to the front matter."""
        return encode_tags(
            managed=self.managed,
            status=self.status,
            archived=self.archived,
            deadline=self.deadline,
            reminder=self.reminder,
            wait_reason=self.wait_reason,
            parent_id=self.parent_id,
            user_tags=self.user_tags,
        )

    def set_tags(self, tags: list[str]) -> None:
        """Replace every tag-encoded attribute by decoding ``tags``."""
        for key, value in decode_tags(tags).items():
            setattr(self, key, value)

    def is_managed_task(self) -> bool:
        return self.managed

    def is_archived(self) -> bool:
        return self.archived

    def archive(self) -> None:
        self.archived = True

    def unarchive(self) -> None:
        self.archived = False

    def _drop_user_tags(self, prefix: str) -> None:
        self.user_tags = [tag for tag in self.user_tags if not tag.startswith(prefix)]

    def set_status(self, status: TaskStatus | str) -> None:
        self.status = TaskStatus(status)
        self._drop_user_tags(STATUS_TAG_PREFIX)

    def set_deadline(self, deadline: date | None) -> None:
        """Set the deadline; None clears it. Datetimes are truncated to their date."""
        if isinstance(deadline, datetime):
            deadline = deadline.date()
        self.deadline = deadline
        self._drop_user_tags(DEADLINE_TAG_PREFIX)

    def set_reminder(self, reminder: datetime | None) -> None:
        """Set the reminder at minute resolution; None clears it."""
        self.reminder = reminder.replace(second=0, microsecond=0) if reminder else None
        self._drop_user_tags(REMINDER_TAG_PREFIX)

    def set_wait_reason(self, reason: str | None) -> None:
        self.wait_reason = reason or ""

    def set_parent_id(self, parent_id: str | None) -> None:
        self.parent_id = parent_id or ""

    def has_parent(self) -> bool:
        return bool(self.parent_id)

    @property
    def timestamp(self) -> str:
        """The ID without its ``task/`` prefix; also the file's base name."""
        return self.id.removeprefix(TASK_ID_PREFIX)
