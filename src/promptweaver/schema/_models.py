"""Data types of the standard schema protocol and validation results."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

STANDARD_SCHEMA_ATTR = "__standard_schema__"
STANDARD_SCHEMA_VERSION = 1


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A path element wrapped in an object, as some validators report them."""

    key: str | int


@dataclass(frozen=True, slots=True)
class SchemaIssue:
    """A single validation problem.

    Attributes:
        message: Human-readable description of the problem.
        path: Location of the offending value inside the input, if known.
    """

    message: str
    path: tuple[str | int | PathSegment, ...] | None = None


@dataclass(frozen=True, slots=True)
class StandardResult:
    """What a protocol ``validate`` call returns: a value or a list of issues."""

    value: Any = None  # pyright: ignore[reportExplicitAny]
    issues: Sequence[SchemaIssue] | None = None


@dataclass(frozen=True, slots=True)
class SchemaValidationResult:
    """Outcome of validating data against a schema.

    ``data`` is set only on success and ``issues`` only on failure.
    """

    success: bool
    data: Any = None  # pyright: ignore[reportExplicitAny]
    issues: tuple[Any, ...] | None = None  # pyright: ignore[reportExplicitAny]
    vendor: str | None = None


def _read(obj: object, name: str) -> object:
    if isinstance(obj, Mapping):
        return obj.get(name)  # pyright: ignore[reportUnknownMemberType]
    return getattr(obj, name, None)


def issue_message(issue: object) -> str:
    """Return the message of an issue given as an object or a mapping."""
    message = _read(issue, "message")
    return "" if message is None else str(message)


def issue_path(issue: object) -> tuple[object, ...]:
    """Return the path of an issue as a tuple, empty when absent."""
    path = _read(issue, "path")
    if path is None or isinstance(path, str):
        return ()
    if isinstance(path, Sequence):
        return tuple(path)  # pyright: ignore[reportUnknownArgumentType]
    return ()


def format_issue_path(issue: object) -> str:
    """Join an issue's path with dots, unwrapping ``{key: ...}`` segments.

    Example:
        ``("user", PathSegment("emails"), 0)`` becomes ``"user.emails.0"``.
    """
    parts: list[str] = []
    for segment in issue_path(issue):
        if isinstance(segment, PathSegment):
            parts.append(str(segment.key))
        elif isinstance(segment, Mapping) and "key" in segment:
            parts.append(str(segment["key"]))  # pyright: ignore[reportUnknownArgumentType]
        else:
            parts.append(str(segment))
    return ".".join(parts)
