"""Arithmetic and numeric comparison helpers.

Operands are coerced leniently, so ``add("2", 3)`` is ``5``. Integral
results are returned as ``int``.
"""

from promptweaver.utils import normalize_number, to_number


def increment(value: object) -> float | int:
    """Add one, for 1-based numbering of ``loop.index0`` style values."""
    return normalize_number(to_number(value) + 1)


def add(a: object, b: object) -> float | int:
    return normalize_number(to_number(a) + to_number(b))


def subtract(a: object, b: object) -> float | int:
    return normalize_number(to_number(a) - to_number(b))


def multiply(a: object, b: object) -> float | int:
    return normalize_number(to_number(a) * to_number(b))


def divide(a: object, b: object) -> float | int:
    """Divide ``a`` by ``b``; division by zero yields 0."""
    divisor = to_number(b)
    if divisor == 0:
        return 0
    return normalize_number(to_number(a) / divisor)


def gt(a: object, b: object) -> bool:
    return to_number(a) > to_number(b)


def gte(a: object, b: object) -> bool:
    return to_number(a) >= to_number(b)


def lt(a: object, b: object) -> bool:
    return to_number(a) < to_number(b)


def lte(a: object, b: object) -> bool:
    return to_number(a) <= to_number(b)


ARITHMETIC_HELPERS = {
    "increment": increment,
    "add": add,
    "subtract": subtract,
    "multiply": multiply,
    "divide": divide,
}

COMPARISON_HELPERS = {
    "gt": gt,
    "gte": gte,
    "lt": lt,
    "lte": lte,
}
