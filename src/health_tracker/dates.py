"""Calendar day helpers in a configured timezone."""

from datetime import date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

WEEK_DAYS = 7


def resolve_timezone(timezone_name: str) -> ZoneInfo:
    """Return the zone for a name, falling back to UTC when unknown."""
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def normalize_day(value: date | datetime, tz: tzinfo) -> date:
    """Truncate a date or instant to its calendar day in ``tz``.

    Naive datetimes are treated as already being local to ``tz``.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def start_of_day(day: date, tz: tzinfo) -> datetime:
    """Return the first instant of ``day`` in ``tz``."""
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    """Return the exclusive end of ``day`` (the next day's start)."""
    return start_of_day(day + timedelta(days=1), tz)


def today(tz: tzinfo) -> date:
    """Return the current calendar day in ``tz``."""
    return datetime.now(tz=tz).date()


def recent_days(current: date, count: int) -> list[date]:
    """Return ``count`` days ending with ``current``, oldest first."""
    start = current - timedelta(days=count - 1)
    return [start + timedelta(days=offset) for offset in range(count)]


def last_7_days(current: date) -> list[date]:
    """Return the week ending with ``current``, oldest first."""
    return recent_days(current, WEEK_DAYS)


def previous_week(current: date) -> list[date]:
    """Return the seven days from 13 to 7 days ago, oldest first."""
    return last_7_days(current - timedelta(days=WEEK_DAYS))
