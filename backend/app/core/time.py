"""Time utilities for timezone-aware UTC datetimes and calendar arithmetic."""

import calendar
from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def add_months(value: date, months: int) -> date:
    """Shift a date by whole calendar months.

    The day is clamped to the end of the target month, so Jan 31 plus one
    month lands on the last day of February. Negative values move backwards.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
