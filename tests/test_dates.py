"""Tests for calendar day helpers."""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from health_tracker.dates import (
    end_of_day,
    last_7_days,
    normalize_day,
    previous_week,
    resolve_timezone,
    start_of_day,
)

BERLIN = ZoneInfo("Europe/Berlin")


def test_normalize_day_converts_aware_instants() -> None:
    instant = datetime(2026, 10, 18, 23, 30, tzinfo=UTC)

    assert normalize_day(instant, BERLIN) == date(2026, 10, 19)
    assert normalize_day(instant, ZoneInfo("UTC")) == date(2026, 10, 18)


def test_normalize_day_keeps_naive_and_plain_dates() -> None:
    assert normalize_day(datetime(2026, 10, 18, 23, 59), BERLIN) == date(2026, 10, 18)
    assert normalize_day(date(2026, 10, 18), BERLIN) == date(2026, 10, 18)


def test_day_bounds_span_one_local_day() -> None:
    start = start_of_day(date(2026, 10, 18), BERLIN)
    end = end_of_day(date(2026, 10, 18), BERLIN)

    assert start.hour == 0
    assert end.date() == date(2026, 10, 19)
    assert start.astimezone(UTC) == datetime(2026, 10, 17, 22, 0, tzinfo=UTC)


def test_week_ranges_are_oldest_first() -> None:
    current = date(2026, 10, 19)

    week = last_7_days(current)
    previous = previous_week(current)

    assert week[0] == date(2026, 10, 13)
    assert week[-1] == current
    assert previous[0] == date(2026, 10, 6)
    assert previous[-1] == date(2026, 10, 12)
    assert len(week) == len(previous) == 7


def test_resolve_timezone_falls_back_to_utc() -> None:
    assert resolve_timezone("Mars/Olympus_Mons").key == "UTC"
    assert resolve_timezone("Europe/Berlin").key == "Europe/Berlin"
