"""Error taxonomy for mdtask.

Every failure raised by the repository and service layers is an
:class:`MdtaskError` carrying an :class:`ErrorKind`, so callers (the MCP tools,
tests) can branch on the category without matching message text.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Category of an mdtask error."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    INTERNAL = "INTERNAL"
    DUPLICATE = "DUPLICATE"
    PERMISSION = "PERMISSION"
    CONFLICT = "CONFLICT"


class MdtaskError(Exception):
    """Base class for all mdtask errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context

    def __str__(self) -> str:
        # Chained causes (``raise ... from exc``) are part of the message.
        if self.__cause__ is not None:
            return f"{self.message}: {self.__cause__}"
        return self.message


class NotFoundError(MdtaskError):
    """A task (or parent task) does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(f"{resource} not found: {identifier}", resource=resource, id=identifier)


class InvalidInputError(MdtaskError):
    """A field failed validation or an operation does not apply to the task's state."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, field: str, value: Any, reason: str = "") -> None:
        message = f"invalid {field}: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, field=field, value=value)


class FrontMatterError(MdtaskError):
    """A file could not be parsed as a task (missing delimiters, bad YAML)."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, reason: str) -> None:
        super().__init__(f"invalid front matter: {reason}", reason=reason)


class InternalError(MdtaskError):
    """I/O or serialization failure. Raise ``from`` the underlying exception."""

    kind = ErrorKind.INTERNAL


class DuplicateError(MdtaskError):
    kind = ErrorKind.DUPLICATE

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(f"{resource} already exists: {identifier}", resource=resource, id=identifier)


class PermissionDeniedError(MdtaskError):
    kind = ErrorKind.PERMISSION

    def __init__(self, action: str, resource: str) -> None:
        super().__init__(
            f"permission denied: cannot {action} {resource}", action=action, resource=resource
        )


class ConflictError(MdtaskError):
    """Reserved for concurrent-edit detection; not raised by the core today."""

    kind = ErrorKind.CONFLICT

    def __init__(self, resource: str, message: str) -> None:
        super().__init__(f"conflict with {resource}: {message}", resource=resource)


def _is_kind(err: BaseException, kind: ErrorKind) -> bool:
    return isinstance(err, MdtaskError) and err.kind == kind


def is_not_found(err: BaseException) -> bool:
    return _is_kind(err, ErrorKind.NOT_FOUND)


def is_invalid_input(err: BaseException) -> bool:
    return _is_kind(err, ErrorKind.INVALID_INPUT)


def is_internal(err: BaseException) -> bool:
    return _is_kind(err, ErrorKind.INTERNAL)


def is_duplicate(err: BaseException) -> bool:
    return _is_kind(err, ErrorKind.DUPLICATE)


def is_permission(err: BaseException) -> bool:
    return _is_kind(err, ErrorKind.PERMISSION)


def is_conflict(err: BaseException) -> bool:
    return _is_kind(err, ErrorKind.CONFLICT)
