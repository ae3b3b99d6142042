"""Schema validation through the standard schema protocol.

Any validator exposing a ``__standard_schema__`` attribute can guard template
data; :func:`pydantic_schema` adapts pydantic models to that protocol.
"""

from ._models import (
    STANDARD_SCHEMA_ATTR,
    PathSegment,
    SchemaIssue,
    SchemaValidationResult,
    StandardResult,
    format_issue_path,
    issue_message,
)
from ._pydantic import PydanticSchema, StandardSchemaProps, pydantic_schema
from ._validation import (
    create_safe_parser,
    format_validation_issues,
    is_standard_schema,
    is_validation_success,
    parse_with_schema,
    parse_with_schema_async,
    validate_with_schema,
    validate_with_schema_async,
)

__all__ = [
    "STANDARD_SCHEMA_ATTR",
    "PathSegment",
    "PydanticSchema",
    "SchemaIssue",
    "SchemaValidationResult",
    "StandardResult",
    "StandardSchemaProps",
    "create_safe_parser",
    "format_issue_path",
    "format_validation_issues",
    "is_standard_schema",
    "is_validation_success",
    "issue_message",
    "parse_with_schema",
    "parse_with_schema_async",
    "pydantic_schema",
    "validate_with_schema",
    "validate_with_schema_async",
]
