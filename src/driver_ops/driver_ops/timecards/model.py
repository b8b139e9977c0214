from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class DayTimecardSummary:
    """Read-model: one driver's total for one work-day (derived, never stored)."""

    work_date: date
    total_seconds: int
    has_open_interval: bool = False


@dataclass(frozen=True)
class WeekTimecardSummary:
    """Read-model: one driver's totals over a closed date range."""

    driver_id: int
    full_name: Optional[str]
    week_start: date
    week_end: date
    days: list[DayTimecardSummary] = field(default_factory=list)
    total_seconds: int = 0
    active_since: Optional[datetime] = None

    def seconds_on(self, work_date: date) -> int:
        for day in self.days:
            if day.work_date == work_date:
                return day.total_seconds
        return 0


@dataclass(frozen=True)
class DayClockStatus:
    """A driver's clock for one work-day: closed time plus the running session."""

    driver_id: int
    work_date: date
    base_seconds: int
    active_since: Optional[datetime]
    total_seconds: int


@dataclass(frozen=True)
class LiveClockEntry:
    driver_id: int
    full_name: str
    license_number: Optional[str]
    clocked_in: bool
    active_since: Optional[datetime]
    running_seconds: int
