"""Date and time helpers built on pendulum.

Inputs may be ``datetime``/``date`` objects, ISO-8601 strings or epoch
milliseconds. Naive values are interpreted as UTC, and "now" is always
``pendulum.now("UTC")``. Unparseable inputs never raise: formatters return an
empty string, predicates return False, arithmetic returns None.
"""

import re

import pendulum

from promptweaver.utils import to_datetime, to_number

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

DEFAULT_DATE_FORMAT = "YYYY-MM-DD"

# Longest tokens first; single-letter tokens only match as whole words
_FORMAT_TOKENS = re.compile(
    r"YYYY|YY|MMMM|MMM|MM|\bM\b|DDDD|DDD|DD|\bD\b|HH|mm|ss"
)


def _format_token(dt: pendulum.DateTime, token: str) -> str:  # noqa: PLR0911
    match token:
        case "YYYY":
            return str(dt.year)
        case "YY":
            return str(dt.year)[-2:]
        case "MMMM":
            return MONTH_NAMES[dt.month - 1]
        case "MMM":
            return MONTH_NAMES[dt.month - 1][:3]
        case "MM":
            return f"{dt.month:02d}"
        case "M":
            return str(dt.month)
        case "DDDD":
            return DAY_NAMES[dt.weekday()]
        case "DDD":
            return DAY_NAMES[dt.weekday()][:3]
        case "DD":
            return f"{dt.day:02d}"
        case "D":
            return str(dt.day)
        case "HH":
            return f"{dt.hour:02d}"
        case "mm":
            return f"{dt.minute:02d}"
        case _:
            return f"{dt.second:02d}"


def format_date(value: object, fmt: object = DEFAULT_DATE_FORMAT) -> str:
    """Format with ``YYYY YY MMMM MMM MM M DDDD DDD DD D HH mm ss`` tokens.

    ``DDDD``/``DDD`` are the full and short weekday names.
    """
    dt = to_datetime(value)
    if dt is None:
        return ""
    pattern = fmt if isinstance(fmt, str) and fmt else DEFAULT_DATE_FORMAT
    return _FORMAT_TOKENS.sub(lambda m: _format_token(dt, m.group(0)), pattern)


def format_time(value: object) -> str:
    """``3:04:05 PM`` style time."""
    dt = to_datetime(value)
    return "" if dt is None else dt.format("h:mm:ss A")


def format_date_time(value: object) -> str:
    """``1/15/2024, 3:04:05 PM`` style date and time."""
    dt = to_datetime(value)
    return "" if dt is None else dt.format("M/D/YYYY, h:mm:ss A")


def _plural(amount: int, unit: str) -> str:
    return f"{amount} {unit}{'' if amount == 1 else 's'}"


def relative_time(value: object) -> str:
    """Describe the distance from now: ``in 2 days``, ``3 hours ago``, ``just now``."""
    dt = to_datetime(value)
    if dt is None:
        return ""

    delta = dt.timestamp() - pendulum.now("UTC").timestamp()
    seconds = int(abs(delta))
    minutes, hours, days = seconds // 60, seconds // 3600, seconds // 86400
    past = delta < 0

    for amount, unit in ((days, "day"), (hours, "hour"), (minutes, "minute")):
        if amount > 0:
            text = _plural(amount, unit)
            return f"{text} ago" if past else f"in {text}"
    return "just now" if past else "in a moment"


def is_today(value: object) -> bool:
    dt = to_datetime(value)
    if dt is None:
        return False
    today = pendulum.now("UTC")
    return dt.in_timezone("UTC").date() == today.date()


def is_past(value: object) -> bool:
    dt = to_datetime(value)
    return dt is not None and dt < pendulum.now("UTC")


def is_future(value: object) -> bool:
    dt = to_datetime(value)
    return dt is not None and dt > pendulum.now("UTC")


def add_days(value: object, days: object) -> pendulum.DateTime | None:
    dt = to_datetime(value)
    return None if dt is None else dt.add(days=int(to_number(days)))


def subtract_days(value: object, days: object) -> pendulum.DateTime | None:
    dt = to_datetime(value)
    return None if dt is None else dt.subtract(days=int(to_number(days)))


def add_hours(value: object, hours: object) -> pendulum.DateTime | None:
    dt = to_datetime(value)
    return None if dt is None else dt.add(hours=int(to_number(hours)))


def subtract_hours(value: object, hours: object) -> pendulum.DateTime | None:
    dt = to_datetime(value)
    return None if dt is None else dt.subtract(hours=int(to_number(hours)))


def add_minutes(value: object, minutes: object) -> pendulum.DateTime | None:
    dt = to_datetime(value)
    return None if dt is None else dt.add(minutes=int(to_number(minutes)))


def subtract_minutes(value: object, minutes: object) -> pendulum.DateTime | None:
    dt = to_datetime(value)
    return None if dt is None else dt.subtract(minutes=int(to_number(minutes)))


def timestamp(value: object) -> int:
    """Epoch milliseconds, or 0 for unparseable input."""
    dt = to_datetime(value)
    return 0 if dt is None else round(dt.timestamp() * 1000)


def unix_timestamp(value: object) -> int:
    """Epoch seconds, or 0 for unparseable input."""
    dt = to_datetime(value)
    return 0 if dt is None else int(dt.timestamp())


DATE_HELPERS = {
    "format_date": format_date,
    "format_time": format_time,
    "format_date_time": format_date_time,
    "relative_time": relative_time,
    "is_today": is_today,
    "is_past": is_past,
    "is_future": is_future,
    "add_days": add_days,
    "subtract_days": subtract_days,
    "add_hours": add_hours,
    "subtract_hours": subtract_hours,
    "add_minutes": add_minutes,
    "subtract_minutes": subtract_minutes,
    "timestamp": timestamp,
    "unix_timestamp": unix_timestamp,
}
