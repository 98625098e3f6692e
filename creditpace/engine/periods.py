"""Whole-day date helpers for accounting periods."""

from datetime import date, timedelta
from typing import Iterator

SATURDAY = 5


def get_period_end(start_date: date, period_days: int) -> date:
    """Last day of a period (inclusive)."""
    return start_date + timedelta(days=period_days - 1)


def inclusive_day_count(start: date, end: date) -> int:
    """Number of days in [start, end]. Zero or negative if end < start."""
    return (end - start).days + 1


def days_elapsed(start_date: date, today: date) -> int:
    """Days of the period that have begun, counting today. Never negative."""
    return max(0, inclusive_day_count(start_date, today))


def is_weekend(day: date) -> bool:
    return day.weekday() >= SATURDAY


def iterate_period_days(start_date: date, period_days: int) -> Iterator[tuple[int, date]]:
    """Yield (day_number, date) for each day of the period, day_number from 1."""
    for offset in range(period_days):
        yield offset + 1, start_date + timedelta(days=offset)
