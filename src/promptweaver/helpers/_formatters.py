"""Value formatters: currency, percentages, compact numbers and casing."""

import math

import orjson

from promptweaver.utils import normalize_number, to_number, to_text


def _grouped(value: float | int, *, max_fraction: int = 3, min_fraction: int = 0) -> str:
    """Format with thousands separators and a bounded number of decimals."""
    text = f"{value:,.{max_fraction}f}"
    if max_fraction > min_fraction and "." in text:
        whole, fraction = text.split(".")
        fraction = fraction.rstrip("0").ljust(min_fraction, "0")
        text = f"{whole}.{fraction}" if fraction else whole
    return text


def currency(value: object) -> str:
    """Format as dollars with two decimals: ``$1,234.56``."""
    return f"${_grouped(abs(to_number(value)), max_fraction=2, min_fraction=2)}"


def signed_currency(value: object) -> str:
    """Format as signed dollars: ``+$1,234.56`` or ``-$1,234.56``."""
    n = to_number(value)
    sign = "+" if n >= 0 else "-"
    return f"{sign}${_grouped(abs(n), max_fraction=2, min_fraction=2)}"


def price(value: object) -> str:
    """Format as dollars with up to four decimals: ``$0.1234``."""
    return f"${normalize_number(round(float(to_number(value)), 4))}"


def percent(value: object) -> str:
    """Format as a percentage with two decimals: ``12.34%``."""
    return f"{to_number(value):.2f}%"


def signed_percent(value: object) -> str:
    """Format as a signed percentage: ``+12.34%`` or ``-12.34%``."""
    n = to_number(value)
    sign = "+" if n >= 0 else ""
    return f"{sign}{n:.2f}%"


def integer(value: object) -> str:
    """Round and group thousands: ``1,234``."""
    return f"{math.floor(to_number(value) + 0.5):,}"


def number(value: object) -> str:
    """Group thousands, keeping up to three decimals: ``1,234.56``."""
    return _grouped(to_number(value))


def compact(value: object) -> str:
    """Abbreviate large numbers: ``1.2K``, ``3.4M``, ``5.6B``."""
    n = to_number(value)
    magnitude = abs(n)
    if magnitude >= 1e9:
        return f"{n / 1e9:.1f}B"
    if magnitude >= 1e6:
        return f"{n / 1e6:.1f}M"
    if magnitude >= 1e3:
        return f"{n / 1e3:.1f}K"
    return str(normalize_number(n))


def upper(value: object) -> str:
    return to_text(value).upper()


def lower(value: object) -> str:
    return to_text(value).lower()


def capitalize(value: object) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    text = to_text(value)
    return text[:1].upper() + text[1:]


def truncate(value: object, length: object = 50) -> str:
    """Shorten to ``length`` characters, ending with ``...`` when cut."""
    text = to_text(value)
    limit = int(to_number(length, 50)) or 50
    return f"{text[: max(limit - 3, 0)]}..." if len(text) > limit else text


def json(value: object) -> str:
    """Serialize to compact JSON; unknown types fall back to ``str``."""
    return orjson.dumps(value, default=str).decode()


FORMATTERS = {
    "currency": currency,
    "price": price,
    "percent": percent,
    "signed_percent": signed_percent,
    "signed_currency": signed_currency,
    "integer": integer,
    "number": number,
    "compact": compact,
    "upper": upper,
    "lower": lower,
    "capitalize": capitalize,
    "truncate": truncate,
    "json": json,
}
