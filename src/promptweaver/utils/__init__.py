"""Shared utilities: logging and lenient value coercion."""

from ._coerce import (
    get_field,
    is_blank,
    is_mapping,
    is_missing,
    is_sequence,
    normalize_number,
    to_datetime,
    to_number,
    to_text,
)
from ._logging import create_logger, get_logger, reset_logger

__all__ = [
    "create_logger",
    "get_field",
    "get_logger",
    "is_blank",
    "is_mapping",
    "is_missing",
    "is_sequence",
    "normalize_number",
    "reset_logger",
    "to_datetime",
    "to_number",
    "to_text",
]
