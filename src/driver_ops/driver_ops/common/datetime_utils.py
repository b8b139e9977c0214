from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.enums import Weekday


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time of the operator.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def seconds_between(start: datetime, end: datetime) -> int:
    """Whole seconds from start to end, floored at zero."""
    return max(0, int((end - start).total_seconds()))


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar day in [start, end]."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def week_window(anchor: date, *, starts_on: Weekday = Weekday.SUNDAY, days: int = 7) -> tuple[date, date]:
    """Closed (week_start, week_end) range containing anchor.

    Presentation helper only; aggregation accepts any closed range.
    """
    if days < 1 or days > 7:
        raise ValueError(f"days must be between 1 and 7, got {days}")

    # date.weekday(): Monday=0 .. Sunday=6
    if starts_on == Weekday.MONDAY:
        offset = anchor.weekday()
    else:
        offset = (anchor.weekday() + 1) % 7
    week_start = anchor - timedelta(days=offset)
    return week_start, week_start + timedelta(days=days - 1)


def js_weekday(value: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday (route assignment convention)."""
    return (value.weekday() + 1) % 7


def format_duration(total_seconds: int) -> str:
    """Format seconds as HH:MM:SS (hours may exceed 24)."""
    total_seconds = max(0, int(total_seconds))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
