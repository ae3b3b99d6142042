from datetime import date, datetime
from typing import TYPE_CHECKING

import pendulum
import pytest

from promptweaver.helpers._date import (
    add_days,
    add_hours,
    add_minutes,
    format_date,
    format_date_time,
    format_time,
    is_future,
    is_past,
    is_today,
    relative_time,
    subtract_days,
    subtract_hours,
    subtract_minutes,
    timestamp,
    unix_timestamp,
)

if TYPE_CHECKING:
    from tests.unit.conftest import FreezeTimeFunc

MOMENT = "2024-01-15T15:04:05Z"


class TestFormatDate:
    @pytest.mark.parametrize(
        ("fmt", "expected"),
        [
            ("MMMM D, YYYY", "January 15, 2024"),
            ("DDDD, MMM D", "Monday, Jan 15"),
            ("DDD DD/MM/YY", "Mon 15/01/24"),
            ("M/D/YYYY HH:mm:ss", "1/15/2024 15:04:05"),
        ],
    )
    def test_tokens(self, fmt: str, expected: str) -> None:
        assert format_date(MOMENT, fmt) == expected

    def test_default_format(self) -> None:
        assert format_date(MOMENT) == "2024-01-15"

    def test_accepts_dates_datetimes_and_epoch_millis(self) -> None:
        assert format_date(date(2024, 3, 5), "MM/DD/YY") == "03/05/24"
        assert format_date(datetime(2024, 3, 5, 10, 0)) == "2024-03-05"
        assert format_date(0) == "1970-01-01"

    @pytest.mark.parametrize("value", [None, "not a date", True, float("nan")])
    def test_unparseable_gives_empty_string(self, value: object) -> None:
        assert format_date(value) == ""

    def test_time_and_date_time(self) -> None:
        assert format_time(MOMENT) == "3:04:05 PM"
        assert format_date_time(MOMENT) == "1/15/2024, 3:04:05 PM"
        assert format_time("garbage") == ""


class TestRelativeTime:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2024-01-17T12:00:00Z", "in 2 days"),
            ("2024-01-15T09:00:00Z", "3 hours ago"),
            ("2024-01-15T12:01:00Z", "in 1 minute"),
            ("2024-01-14T12:00:00Z", "1 day ago"),
            ("2024-01-15T11:59:30Z", "just now"),
            ("2024-01-15T12:00:30Z", "in a moment"),
        ],
    )
    def test_relative_to_now(self, freeze_time: "FreezeTimeFunc", value: str, expected: str) -> None:
        _ = freeze_time(2024, 1, 15, 12)
        assert relative_time(value) == expected

    def test_unparseable(self) -> None:
        assert relative_time("nope") == ""


class TestPredicates:
    def test_is_today(self, freeze_time: "FreezeTimeFunc") -> None:
        _ = freeze_time(2024, 1, 15, 12)
        assert is_today("2024-01-15T23:59:00Z")
        assert not is_today("2024-01-14T23:59:00Z")
        assert not is_today("nope")

    def test_past_and_future(self, freeze_time: "FreezeTimeFunc") -> None:
        _ = freeze_time(2024, 1, 15, 12)
        assert is_past("2024-01-15T11:00:00Z")
        assert not is_past("2024-01-15T13:00:00Z")
        assert is_future("2024-01-15T13:00:00Z")
        assert not is_future("nope")


class TestArithmetic:
    def test_days(self) -> None:
        result = add_days("2024-01-30T00:00:00Z", 2)
        assert result == pendulum.datetime(2024, 2, 1, tz="UTC")
        assert subtract_days("2024-03-01", "1") == pendulum.datetime(2024, 2, 29, tz="UTC")

    def test_hours_and_minutes(self) -> None:
        start = "2024-01-15T10:00:00Z"
        assert add_hours(start, 3) == pendulum.datetime(2024, 1, 15, 13, tz="UTC")
        assert subtract_hours(start, 11) == pendulum.datetime(2024, 1, 14, 23, tz="UTC")
        assert add_minutes(start, 90) == pendulum.datetime(2024, 1, 15, 11, 30, tz="UTC")
        assert subtract_minutes(start, 1) == pendulum.datetime(2024, 1, 15, 9, 59, tz="UTC")

    def test_unparseable_returns_none(self) -> None:
        assert add_days("nope", 1) is None

    def test_timestamps(self) -> None:
        assert timestamp("1970-01-01T00:00:01Z") == 1000
        assert unix_timestamp("1970-01-01T00:00:01Z") == 1
        assert timestamp("nope") == 0
        assert unix_timestamp(None) == 0

    def test_epoch_millis_round_trip(self) -> None:
        assert timestamp(1_700_000_000_123) == 1_700_000_000_123
