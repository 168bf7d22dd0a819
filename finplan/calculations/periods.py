"""
Calendar helpers.

Months are ISO strings (YYYY-MM). Weekdays are numbered Sunday-first
(0 = Sunday) to match how the dashboard labels its weekday chart.
"""

import calendar
from datetime import date

WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def month_key(d: date) -> str:
    return d.strftime("%Y-%m")


def parse_month(month: str) -> date:
    """First day of an ISO month string."""
    year, mon = month.split("-")
    return date(int(year), int(mon), 1)


def month_bounds(month: str) -> tuple[date, date]:
    """First and last day of a month, both inclusive."""
    start = parse_month(month)
    last_day = calendar.monthrange(start.year, start.month)[1]
    return start, start.replace(day=last_day)


def shift_month(month: str, offset: int) -> str:
    start = parse_month(month)
    index = start.year * 12 + (start.month - 1) + offset
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def add_months(d: date, offset: int) -> date:
    """Same day in a later month, clamped to that month's last day."""
    index = d.year * 12 + (d.month - 1) + offset
    year, month = index // 12, index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def trailing_months(reference: date, count: int) -> list[str]:
    """The `count` months ending with the reference month, oldest first."""
    current = month_key(reference)
    return [shift_month(current, -offset) for offset in range(count - 1, -1, -1)]


def whole_months_between(start: date, end: date) -> int:
    """
    Number of full months from start to end.

    A month only counts once the day of month has been reached again,
    so Jan 31 -> Feb 28 is 0 months. Negative when end is before start.
    """
    if end < start:
        return -whole_months_between(end, start)
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


def weekday_index(d: date) -> int:
    """Sunday-first weekday number (0 = Sunday, 6 = Saturday)."""
    return (d.weekday() + 1) % 7
