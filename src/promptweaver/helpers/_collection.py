"""List helpers: searching, ordering, grouping and reshaping.

Items may be mappings or objects; ``property`` arguments are looked up as
keys first and attributes second. Non-list inputs yield an empty result
rather than an error.
"""

from functools import cmp_to_key
from numbers import Real

from promptweaver.utils import get_field, is_missing, is_sequence, to_number


def _items(values: object) -> list[object]:
    return list(values) if is_sequence(values) else []  # pyright: ignore[reportArgumentType]


def _value_of(item: object, prop: str) -> object:
    found, value = get_field(item, prop)
    return value if found else item


def _matches(item: object, prop: object, expected: object) -> bool:
    if isinstance(prop, str):
        found, value = get_field(item, prop)
        if found:
            return value == expected
    return item == (prop if expected is None else expected)


def length(values: object) -> int:
    """Length of a list or string; 0 for anything else."""
    if isinstance(values, str) or is_sequence(values):
        return len(values)  # pyright: ignore[reportArgumentType]
    return 0


def _truthy(item: object, prop: object) -> bool:
    if isinstance(prop, str):
        found, value = get_field(item, prop)
        if found:
            return bool(value)
    return bool(item)


def filter_items(values: object, prop: object = None) -> list[object]:
    """Keep items whose ``prop`` is truthy (or truthy items when no prop)."""
    return [item for item in _items(values) if _truthy(item, prop)]


def map_items(values: object, prop: object) -> list[object]:
    """Pluck ``prop`` from every item; items lacking it pass through."""
    if not isinstance(prop, str):
        return _items(values)
    return [_value_of(item, prop) for item in _items(values)]


def reduce_items(values: object, initial: object = 0) -> object:
    """Sum numeric items onto a numeric ``initial``; other values are skipped."""
    if not is_sequence(values):
        return initial
    total = initial
    for item in _items(values):
        if isinstance(total, Real) and isinstance(item, Real) and not isinstance(item, bool):
            total = total + item
    return total


def find(values: object, prop: object, expected: object = None) -> object:
    """First item whose ``prop`` equals ``expected`` (or equal to ``prop``)."""
    for item in _items(values):
        if _matches(item, prop, expected):
            return item
    return None


def find_index(values: object, prop: object, expected: object = None) -> int:
    for index, item in enumerate(_items(values)):
        if _matches(item, prop, expected):
            return index
    return -1


def includes(values: object, value: object) -> bool:
    return value in _items(values)


def _compare(a: object, b: object) -> int:
    if isinstance(a, Real) and isinstance(b, Real):
        return (a > b) - (a < b)
    left, right = str(a), str(b)
    return (left > right) - (left < right)


def sort_items(values: object, prop: object = None) -> list[object]:
    """Sort numbers numerically and everything else by string value."""
    items = _items(values)
    if isinstance(prop, str) and prop:
        return sorted(
            items,
            key=cmp_to_key(lambda a, b: _compare(_value_of(a, prop), _value_of(b, prop))),
        )
    return sorted(items, key=cmp_to_key(_compare))


def reverse(values: object) -> list[object]:
    return _items(values)[::-1]


def first(values: object) -> object:
    items = _items(values)
    return items[0] if items else None


def last(values: object) -> object:
    items = _items(values)
    return items[-1] if items else None


def nth(values: object, index: object) -> object:
    """Item at a non-negative ``index``; out of range gives None."""
    items = _items(values)
    idx = int(to_number(index, -1))
    if idx < 0 or idx >= len(items):
        return None
    return items[idx]


def unique(values: object) -> list[object]:
    """Drop repeated items, keeping first occurrences in order."""
    result: list[object] = []
    for item in _items(values):
        if item not in result:
            result.append(item)
    return result


def group_by(values: object, prop: object) -> dict[str, list[object]]:
    """Group items by the string form of ``prop``."""
    if not is_sequence(values):
        return {}
    groups: dict[str, list[object]] = {}
    for item in _items(values):
        key = str(_value_of(item, prop) if isinstance(prop, str) else item)
        groups.setdefault(key, []).append(item)
    return groups


def partition(values: object, prop: object = None) -> dict[str, list[object]]:
    """Split into ``{"true": [...], "false": [...]}`` by truthiness of ``prop``."""
    result: dict[str, list[object]] = {"true": [], "false": []}
    for item in _items(values):
        result["true" if _truthy(item, prop) else "false"].append(item)
    return result


def chunk(values: object, size: object) -> list[list[object]]:
    items = _items(values)
    step = int(to_number(size, 1)) or 1
    step = max(step, 1)
    return [items[i : i + step] for i in range(0, len(items), step)]


def flatten(values: object) -> list[object]:
    """Flatten one level of nesting."""
    result: list[object] = []
    for item in _items(values):
        if is_sequence(item):
            result.extend(item)  # pyright: ignore[reportArgumentType]
        else:
            result.append(item)
    return result


def array_slice(values: object, start: object = 0, end: object = None) -> list[object]:
    items = _items(values)
    stop = None if is_missing(end) else int(to_number(end))
    return items[int(to_number(start)) : stop]


COLLECTION_HELPERS = {
    "length": length,
    "filter": filter_items,
    "map": map_items,
    "reduce": reduce_items,
    "find": find,
    "find_index": find_index,
    "includes": includes,
    "sort": sort_items,
    "reverse": reverse,
    "first": first,
    "last": last,
    "nth": nth,
    "unique": unique,
    "group_by": group_by,
    "partition": partition,
    "chunk": chunk,
    "flatten": flatten,
    "array_slice": array_slice,
}
