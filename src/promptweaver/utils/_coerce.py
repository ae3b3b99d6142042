"""Lenient value coercion shared by the helper catalog.

Template data is loosely typed: numbers arrive as strings, dates as ISO text
or epoch milliseconds, and missing variables as Jinja2 ``Undefined``. These
helpers normalise such values without raising.
"""

import math
from collections.abc import Mapping, Sequence
from datetime import date, datetime

import pendulum
from jinja2 import Undefined


def is_missing(value: object) -> bool:
    """Return True for ``None`` and Jinja2 undefined values."""
    return value is None or isinstance(value, Undefined)


def is_blank(value: object) -> bool:
    """Return True for missing values and the empty string."""
    return is_missing(value) or value == ""


def to_number(value: object, default: float = 0) -> float | int:
    """Convert a value to a number, returning ``default`` when impossible.

    Integers and integral strings stay ``int``; everything else becomes
    ``float``. NaN is treated as unconvertible.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return default if math.isnan(value) else value
    if is_missing(value):
        return default
    text = str(value).strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return default
    return default if math.isnan(number) else number


def normalize_number(value: float | int) -> float | int:
    """Collapse integral floats to ``int`` so ``6 / 3`` renders as ``2``."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def to_text(value: object, default: str = "") -> str:
    """Convert a value to ``str``; missing values become ``default``."""
    if is_missing(value):
        return default
    return str(value)


def to_datetime(value: object) -> pendulum.DateTime | None:
    """Convert a value to a timezone-aware ``pendulum.DateTime``.

    Accepts ``datetime``/``date`` objects, ISO-8601 strings and numbers
    (interpreted as epoch milliseconds). Naive values are taken as UTC.

    Returns:
        The converted datetime, or None if the value cannot be interpreted.
    """
    if isinstance(value, bool) or is_missing(value):
        return None
    if isinstance(value, pendulum.DateTime):
        return value
    if isinstance(value, datetime):
        return pendulum.instance(value, tz="UTC")
    if isinstance(value, date):
        return pendulum.datetime(value.year, value.month, value.day, tz="UTC")
    if isinstance(value, int | float):
        if isinstance(value, float) and math.isnan(value):
            return None
        try:
            return pendulum.from_timestamp(value / 1000, tz="UTC")
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            parsed = pendulum.parse(value, tz="UTC")
        except ValueError:
            return None
        # pendulum.parse can return DateTime, Date, Time, or Duration
        if isinstance(parsed, pendulum.DateTime):
            return parsed
        if isinstance(parsed, pendulum.Date):
            return pendulum.datetime(parsed.year, parsed.month, parsed.day, tz="UTC")
        return None
    return None


def is_sequence(value: object) -> bool:
    """Return True for list-like values (not strings, bytes or mappings)."""
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


def is_mapping(value: object) -> bool:
    """Return True for dict-like values."""
    return isinstance(value, Mapping)


def get_field(item: object, key: str) -> tuple[bool, object]:
    """Look up ``key`` on a mapping or object.

    Returns:
        A ``(found, value)`` pair.
    """
    if isinstance(item, Mapping):
        if key in item:
            return True, item[key]
        return False, None
    if item is not None and not isinstance(item, str | int | float | bool):
        try:
            return True, getattr(item, key)
        except AttributeError:
            return False, None
    return False, None
