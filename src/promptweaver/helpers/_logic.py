"""Equality, boolean logic and conditional helpers.

Jinja2 reserves ``and``/``or``/``not`` as operators, so the logical helpers
are exposed as ``and_``/``or_``/``not_`` in the style of :mod:`operator`.
"""

from collections.abc import Mapping

from promptweaver.utils import is_blank, is_missing


def eq(a: object, b: object) -> bool:
    return a == b


def ne(a: object, b: object) -> bool:
    return a != b


def and_(*values: object) -> bool:
    """True when every argument is truthy."""
    return all(bool(v) for v in values)


def or_(*values: object) -> bool:
    """True when any argument is truthy."""
    return any(bool(v) for v in values)


def not_(value: object) -> bool:
    return not value


def if_else(condition: object, if_true: object, if_false: object = "") -> object:
    """Inline conditional: ``if_else(is_admin, "Admin", "User")``."""
    return if_true if condition else if_false


def switch(value: object, cases: Mapping[object, object], default: object = "") -> object:
    """Pick the entry of ``cases`` whose key equals ``value``.

    Example:
        {{ switch(status, {"active": "On", "paused": "Off"}, "Unknown") }}
    """
    if not isinstance(cases, Mapping):
        return default
    for key, result in cases.items():
        if key == value:
            return result
    return default


def coalesce(*values: object) -> object:
    """First argument that is neither missing nor empty, else ``""``."""
    for value in values:
        if not is_blank(value):
            return value
    return ""


def default(value: object, default_value: object) -> object:
    """``value`` unless it is missing or empty."""
    return default_value if is_blank(value) else value


def exists(value: object) -> bool:
    """True for anything but ``None`` and undefined values."""
    return not is_missing(value)


def is_defined(value: object) -> bool:
    """True unless the value is a Jinja2 undefined (``None`` counts as defined)."""
    return value is None or not is_missing(value)


LOGIC_HELPERS = {
    "eq": eq,
    "ne": ne,
    "and_": and_,
    "or_": or_,
    "not_": not_,
}

CONDITIONAL_HELPERS = {
    "if_else": if_else,
    "switch": switch,
    "coalesce": coalesce,
    "default": default,
    "exists": exists,
    "is_defined": is_defined,
}
