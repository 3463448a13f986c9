"""Front-matter codec: tasks to and from Markdown files with a YAML header."""

from datetime import date, datetime
from typing import Any

import yaml

from mdtask.constants import DATE_FORMAT, DATETIME_FORMAT, FRONT_MATTER_DELIMITER
from mdtask.errors import FrontMatterError, InternalError
from mdtask.models.task import Task

# Key order of the serialized front matter.
FRONT_MATTER_FIELDS = ("id", "aliases", "tags", "created", "description", "title", "updated")


class _FrontMatterDumper(yaml.SafeDumper):
    """SafeDumper that indents block sequences under their key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        return super().increase_indent(flow, False)


def _parse_timestamp(value: Any) -> datetime:
    """
    Parse a front-matter timestamp, never failing.

    Accepts ``YYYY-MM-DD HH:MM``, then ``YYYY-MM-DD``, and YAML-native date or
    datetime scalars. Anything else becomes the current time.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        for fmt in (DATETIME_FORMAT, DATE_FORMAT):
            try:
                return datetime.strptime(value.strip(), fmt)
            except ValueError:
                continue
    return datetime.now()


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_text_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [_as_text(item) for item in value if item is not None]
    return [_as_text(value)]


def split_front_matter(text: str) -> tuple[str, str]:
    """
    Split a document into its front-matter block and body.

    The first line must be ``---`` and a later line must be ``---`` too.
    Leading blank lines of the body are dropped.

    Raises:
        FrontMatterError: If the delimiters are missing or unterminated
    """
    lines = text.split("\n")
    if len(lines) < 3 or lines[0] != FRONT_MATTER_DELIMITER:
        raise FrontMatterError("no front matter found")

    try:
        end = lines.index(FRONT_MATTER_DELIMITER, 1)
    except ValueError:
        raise FrontMatterError("front matter not properly closed") from None

    front_matter = "\n".join(lines[1:end])
    body = "\n".join(lines[end + 1 :]).lstrip("\n")
    return front_matter, body


def parse_task_file(data: bytes | str) -> Task:
    """
    Parse a task file.

    Args:
        data: Raw file content (UTF-8 bytes or text)

    Returns:
        Task built from the front matter and body

    Raises:
        FrontMatterError: If the content is not UTF-8, has no delimited
            front matter, or the block is not a YAML mapping
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FrontMatterError(f"file is not valid UTF-8 ({e.reason})") from e

    front_matter, body = split_front_matter(data)

    try:
        fm = yaml.safe_load(front_matter)
    except yaml.YAMLError as e:
        raise FrontMatterError(f"failed to parse YAML front matter: {e}") from e

    if fm is None:
        fm = {}
    if not isinstance(fm, dict):
        raise FrontMatterError(f"front matter must be a mapping, got {type(fm).__name__}")

    return Task(
        id=_as_text(fm.get("id")),
        title=_as_text(fm.get("title")),
        description=_as_text(fm.get("description")),
        aliases=_as_text_list(fm.get("aliases")),
        tags=_as_text_list(fm.get("tags")),
        created=_parse_timestamp(fm.get("created")),
        updated=_parse_timestamp(fm.get("updated")),
        content=body,
    )


def write_task_file(task: Task) -> bytes:
    """
    Serialize a task as front matter plus body.

    Raises:
        InternalError: If the front matter cannot be dumped as YAML
    """
    fm = {
        "id": task.id,
        "aliases": list(task.aliases),
        "tags": task.tags,
        "created": task.created.strftime(DATETIME_FORMAT),
        "description": task.description,
        "title": task.title,
        "updated": task.updated.strftime(DATETIME_FORMAT),
    }

    try:
        yaml_str = yaml.dump(
            fm,
            Dumper=_FrontMatterDumper,
            indent=4,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            width=4096,
        )
    except yaml.YAMLError as e:
        raise InternalError("failed to marshal front matter") from e

    parts = [FRONT_MATTER_DELIMITER, "\n", yaml_str, FRONT_MATTER_DELIMITER, "\n\n"]
    content = task.content.strip()
    if content:
        parts.extend([content, "\n"])
    return "".join(parts).encode("utf-8")
