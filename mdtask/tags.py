"""Tag-string attribute codec.

Tasks persist their structured attributes as prefixed tag strings
(``mdtask/status/WIP``, ``mdtask/deadline/2025-01-31`` ...). The helpers in
this module are the only place that knows about that encoding: the list-level
primitives (:func:`get_tag_value`, :func:`set_tag_value`) keep single-valued
attributes exclusive, and :func:`decode_tags` / :func:`encode_tags` convert
between a tag list and the typed fields of :class:`~mdtask.models.task.Task`.
"""

from datetime import date, datetime
from typing import Any

from mdtask.constants import (
    ARCHIVED_TAG,
    DATE_FORMAT,
    DEADLINE_TAG_PREFIX,
    PARENT_TAG_PREFIX,
    REMINDER_FORMAT,
    REMINDER_TAG_PREFIX,
    STATUS_TAG_PREFIX,
    SYSTEM_TAG_PREFIX,
    TAG_PREFIX,
    WAITFOR_TAG_PREFIX,
)
from mdtask.enums import TaskStatus

# Attribute tags understood by decode_tags; anything else is kept as a user tag.
ATTRIBUTE_PREFIXES: tuple[str, ...] = (
    STATUS_TAG_PREFIX,
    DEADLINE_TAG_PREFIX,
    REMINDER_TAG_PREFIX,
    WAITFOR_TAG_PREFIX,
    PARENT_TAG_PREFIX,
)


def get_tag_value(tags: list[str], prefix: str) -> str:
    """
    Return the suffix of the first tag carrying ``prefix``.

    A tag equal to the bare prefix has no value and is skipped.

    Args:
        tags: Tag list to scan
        prefix: Attribute prefix, including its trailing slash

    Returns:
        The value after the prefix, or an empty string when absent
    """
    for tag in tags:
        if len(tag) > len(prefix) and tag.startswith(prefix):
            return tag[len(prefix) :]
    return ""


def set_tag_value(tags: list[str], prefix: str, value: str) -> list[str]:
    """
    Replace every tag carrying ``prefix`` with a single ``prefix + value`` tag.

    An empty ``value`` clears the attribute. Other tags keep their order.
    """
    result = [tag for tag in tags if not tag.startswith(prefix)]
    if value:
        result.append(prefix + value)
    return result


def has_tag(tags: list[str], tag: str) -> bool:
    return tag in tags


def add_tag(tags: list[str], tag: str) -> list[str]:
    """Append ``tag`` unless it is already present."""
    if tag in tags:
        return list(tags)
    return [*tags, tag]


def remove_tag(tags: list[str], tag: str) -> list[str]:
    return [t for t in tags if t != tag]


def has_tag_ci(tags: list[str], search: str) -> bool:
    """Case-insensitive exact tag membership."""
    search = search.lower()
    return any(tag.lower() == search for tag in tags)


def is_system_tag(tag: str) -> bool:
    """True for the ``mdtask`` marker and anything under ``mdtask/``."""
    return tag == TAG_PREFIX or tag.startswith(SYSTEM_TAG_PREFIX)


def _is_attribute_tag(tag: str) -> bool:
    return tag == TAG_PREFIX or tag == ARCHIVED_TAG or tag.startswith(ATTRIBUTE_PREFIXES)


def parse_deadline(value: str) -> date | None:
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def parse_reminder(value: str) -> datetime | None:
    for fmt in (REMINDER_FORMAT, DATE_FORMAT):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


# Attributes with a typed value; a tag whose value fails to parse is kept as written.
_TYPED_ATTRIBUTES = (
    (STATUS_TAG_PREFIX, TaskStatus.parse),
    (DEADLINE_TAG_PREFIX, parse_deadline),
    (REMINDER_TAG_PREFIX, parse_reminder),
)


def _unparsed_values(tags: list[str]) -> dict[str, str]:
    """
    Map each typed attribute prefix to its winning value when that value does
    not parse (``mdtask/status/BLOCKED``, ``mdtask/deadline/next-week``).
    """
    values: dict[str, str] = {}
    for prefix, parse in _TYPED_ATTRIBUTES:
        raw = get_tag_value(tags, prefix)
        if raw and parse(raw) is None:
            values[prefix] = raw
    return values


def decode_tags(tags: list[str]) -> dict[str, Any]:
    """
    Decode a tag list into typed task attributes.

    Never raises: a missing or unknown status decodes to TODO, and deadline or
    reminder values that do not parse decode to None. Such unparsed tags are
    kept verbatim in ``user_tags`` so that a rewrite does not lose them. When
    an attribute tag appears more than once, the first occurrence wins.

    Args:
        tags: Tags as read from a task file

    Returns:
        Dict with the keys ``managed``, ``status``, ``archived``, ``deadline``,
        ``reminder``, ``wait_reason``, ``parent_id`` and ``user_tags``
    """
    tags = [str(tag) for tag in tags]
    unparsed = {prefix + raw for prefix, raw in _unparsed_values(tags).items()}
    deadline_raw = get_tag_value(tags, DEADLINE_TAG_PREFIX)
    reminder_raw = get_tag_value(tags, REMINDER_TAG_PREFIX)
    return {
        "managed": has_tag(tags, TAG_PREFIX),
        "status": TaskStatus.parse(get_tag_value(tags, STATUS_TAG_PREFIX)) or TaskStatus.TODO,
        "archived": has_tag(tags, ARCHIVED_TAG),
        "deadline": parse_deadline(deadline_raw) if deadline_raw else None,
        "reminder": parse_reminder(reminder_raw) if reminder_raw else None,
        "wait_reason": get_tag_value(tags, WAITFOR_TAG_PREFIX),
        "parent_id": get_tag_value(tags, PARENT_TAG_PREFIX),
        "user_tags": [tag for tag in tags if not _is_attribute_tag(tag) or tag in unparsed],
    }


def encode_tags(
    *,
    managed: bool,
    status: TaskStatus,
    archived: bool = False,
    deadline: date | None = None,
    reminder: datetime | None = None,
    wait_reason: str = "",
    parent_id: str = "",
    user_tags: list[str] | None = None,
) -> list[str]:
    """
    Encode typed task attributes as a tag list.

    Order: ``mdtask`` marker, user tags, status, deadline, reminder, wait
    reason, parent, archived. An unparsed status, deadline or reminder tag
    carried in ``user_tags`` is written back in its slot, unless a typed
    deadline or reminder replaces it. Exactly one status tag is written.
    """
    user_tags = user_tags or []
    unparsed = _unparsed_values(user_tags)

    tags = [TAG_PREFIX] if managed else []
    tags.extend(tag for tag in user_tags if not _is_attribute_tag(tag))
    tags = set_tag_value(tags, STATUS_TAG_PREFIX, unparsed.get(STATUS_TAG_PREFIX) or TaskStatus(status).value)
    tags = set_tag_value(
        tags,
        DEADLINE_TAG_PREFIX,
        deadline.strftime(DATE_FORMAT) if deadline else unparsed.get(DEADLINE_TAG_PREFIX, ""),
    )
    tags = set_tag_value(
        tags,
        REMINDER_TAG_PREFIX,
        reminder.strftime(REMINDER_FORMAT) if reminder else unparsed.get(REMINDER_TAG_PREFIX, ""),
    )
    tags = set_tag_value(tags, WAITFOR_TAG_PREFIX, wait_reason)
    tags = set_tag_value(tags, PARENT_TAG_PREFIX, parent_id)
    if archived:
        tags = add_tag(tags, ARCHIVED_TAG)
    return tags
