"""Mapping helpers: lookup, selection, merging and emptiness checks."""

from collections.abc import Mapping

from promptweaver.utils import get_field, is_missing, is_sequence, to_text


def get(obj: object, key: object) -> object:
    if not isinstance(obj, Mapping):
        return None
    return obj.get(key)


def has(obj: object, key: object) -> bool:
    return isinstance(obj, Mapping) and key in obj


def keys(obj: object) -> list[object]:
    return list(obj.keys()) if isinstance(obj, Mapping) else []


def values(obj: object) -> list[object]:
    return list(obj.values()) if isinstance(obj, Mapping) else []


def pick(obj: object, *names: object) -> dict[object, object]:
    """Copy of ``obj`` restricted to ``names``."""
    if not isinstance(obj, Mapping):
        return {}
    return {name: obj[name] for name in names if name in obj}


def omit(obj: object, *names: object) -> dict[object, object]:
    """Copy of ``obj`` without ``names``."""
    if not isinstance(obj, Mapping):
        return {}
    return {key: value for key, value in obj.items() if key not in names}


def merge(*objects: object) -> dict[object, object]:
    """Shallow merge; later mappings win. Non-mappings are ignored."""
    result: dict[object, object] = {}
    for obj in objects:
        if isinstance(obj, Mapping):
            result.update(obj)
    return result


def defaults(obj: object, fallback: object) -> dict[object, object]:
    """``obj`` with missing keys filled in from ``fallback``."""
    return merge(fallback, obj)


def deep_get(obj: object, path: object) -> object:
    """Follow a dotted ``path`` through nested mappings or objects.

    Numeric segments index into lists, so ``deep_get(data, "items.0.name")``
    works. Returns None as soon as a segment is missing.
    """
    if is_missing(obj) or isinstance(obj, str | int | float | bool):
        return None
    current = obj
    for segment in to_text(path).split("."):
        if is_sequence(current) and segment.lstrip("-").isdigit():
            index = int(segment)
            if not -len(current) <= index < len(current):  # pyright: ignore[reportArgumentType]
                return None
            current = current[index]  # pyright: ignore[reportIndexIssue]
            continue
        found, current = get_field(current, segment)
        if not found:
            return None
    return current


def is_empty(value: object) -> bool:
    """True for missing values and empty strings, lists and mappings."""
    if is_missing(value):
        return True
    if isinstance(value, str | Mapping) or is_sequence(value):
        return len(value) == 0  # pyright: ignore[reportArgumentType]
    return False


def is_not_empty(value: object) -> bool:
    return not is_empty(value)


OBJECT_HELPERS = {
    "get": get,
    "has": has,
    "keys": keys,
    "values": values,
    "pick": pick,
    "omit": omit,
    "merge": merge,
    "defaults": defaults,
    "deep_get": deep_get,
    "is_empty": is_empty,
    "is_not_empty": is_not_empty,
}
