"""Validation against any object implementing the standard schema protocol.

A schema exposes a ``__standard_schema__`` attribute holding (as a mapping or
as attributes) ``version == 1``, a ``vendor`` name and a ``validate(value)``
callable. ``validate`` returns a result carrying either ``value`` or
``issues``, directly or as an awaitable.
"""

import inspect
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from promptweaver.exceptions import (
    AsyncValidationError,
    InvalidSchemaError,
    SchemaValidationError,
)

from ._models import (
    STANDARD_SCHEMA_ATTR,
    STANDARD_SCHEMA_VERSION,
    SchemaValidationResult,
    format_issue_path,
    issue_message,
)

INVALID_SCHEMA_MESSAGE = (
    "Invalid schema: expected an object implementing the standard schema "
    f"protocol (a {STANDARD_SCHEMA_ATTR!r} attribute with version "
    f"{STANDARD_SCHEMA_VERSION}, a vendor and a validate callable)"
)


def _prop(props: object, name: str) -> object:
    if isinstance(props, Mapping):
        return props.get(name)  # pyright: ignore[reportUnknownMemberType]
    return getattr(props, name, None)


def _props(schema: object) -> object:
    if schema is None:
        return None
    return getattr(schema, STANDARD_SCHEMA_ATTR, None)


def is_standard_schema(value: object) -> bool:
    """Return True if ``value`` implements the standard schema protocol."""
    props = _props(value)
    if props is None:
        return False
    version = _prop(props, "version")
    return (
        not isinstance(version, bool)
        and version == STANDARD_SCHEMA_VERSION
        and isinstance(_prop(props, "vendor"), str)
        and callable(_prop(props, "validate"))
    )


def _vendor(props: object) -> str | None:
    vendor = _prop(props, "vendor")
    return vendor if isinstance(vendor, str) else None


def _validator(schema: object) -> tuple[Callable[[object], object], str | None]:
    if not is_standard_schema(schema):
        raise InvalidSchemaError(INVALID_SCHEMA_MESSAGE)
    props = _props(schema)
    validate = _prop(props, "validate")
    return validate, _vendor(props)  # pyright: ignore[reportReturnType]


def _to_result(raw: object, vendor: str | None) -> SchemaValidationResult:
    issues = _prop(raw, "issues")
    if issues is not None:
        return SchemaValidationResult(
            success=False,
            issues=tuple(issues) if isinstance(issues, Sequence) else (issues,),  # pyright: ignore[reportUnknownArgumentType]
            vendor=vendor,
        )
    return SchemaValidationResult(success=True, data=_prop(raw, "value"), vendor=vendor)


def validate_with_schema(schema: object, data: object) -> SchemaValidationResult:
    """Validate ``data`` synchronously.

    Raises:
        InvalidSchemaError: If ``schema`` does not implement the protocol.
        AsyncValidationError: If the validator returned an awaitable; use
            :func:`validate_with_schema_async` for such validators.
    """
    validate, vendor = _validator(schema)
    raw = validate(data)
    if inspect.isawaitable(raw):
        if inspect.iscoroutine(raw):
            raw.close()
        msg = (
            "Async validation detected. "
            "Use validate_with_schema_async() for async validators."
        )
        raise AsyncValidationError(msg)
    return _to_result(raw, vendor)


async def validate_with_schema_async(schema: object, data: object) -> SchemaValidationResult:
    """Validate ``data``, awaiting the validator's result when necessary.

    Raises:
        InvalidSchemaError: If ``schema`` does not implement the protocol.
    """
    validate, vendor = _validator(schema)
    raw = validate(data)
    if inspect.isawaitable(raw):
        raw = await raw
    return _to_result(raw, vendor)


def _raise_for(result: SchemaValidationResult) -> None:
    issues = result.issues or ()
    raise SchemaValidationError(
        f"Validation failed with {len(issues)} issue(s)",
        issues,
        result.vendor,
    )


def parse_with_schema(schema: object, data: object) -> Any:  # pyright: ignore[reportExplicitAny]
    """Return the validated (possibly transformed) data.

    Raises:
        SchemaValidationError: If validation reports any issue.
    """
    result = validate_with_schema(schema, data)
    if not result.success:
        _raise_for(result)
    return result.data


async def parse_with_schema_async(schema: object, data: object) -> Any:  # pyright: ignore[reportExplicitAny]
    """Async counterpart of :func:`parse_with_schema`."""
    result = await validate_with_schema_async(schema, data)
    if not result.success:
        _raise_for(result)
    return result.data


def create_safe_parser(schema: object) -> Callable[[object], Any]:  # pyright: ignore[reportExplicitAny]
    """Build a parser that returns None instead of raising on invalid data.

    Example:
        parse_user = create_safe_parser(pydantic_schema(User))
        user = parse_user(payload)  # None when payload is invalid
    """

    def parse(data: object) -> Any:  # pyright: ignore[reportExplicitAny]
        try:
            return parse_with_schema(schema, data)
        except SchemaValidationError:
            return None

    return parse


def is_validation_success(result: SchemaValidationResult) -> bool:
    """Return True for a successful result that carries data."""
    return result.success and result.data is not None


def format_validation_issues(issues: Sequence[object]) -> str:
    """Number each issue and append its path: ``1. Required at "user.name"``."""
    lines: list[str] = []
    for index, issue in enumerate(issues, start=1):
        path = format_issue_path(issue)
        location = f' at "{path}"' if path else ""
        lines.append(f"{index}. {issue_message(issue)}{location}")
    return "\n".join(lines)
