from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import seconds_between
from ..core.enums import ClockOutcome


@dataclass(frozen=True)
class TimeInterval:
    """Domain entity: one paid-time session of a driver on a work-day.

    An interval with no end_time is "open" (the driver is clocked in).
    Once closed it is never modified again.
    """

    interval_id: int
    driver_id: int
    work_date: date
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_seconds: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def elapsed_seconds(self, now: datetime) -> int:
        """Seconds this interval contributes to a timecard as of `now`.

        Closed: the stored duration wins, else end - start.
        Open: running time up to `now`, floored at zero.
        """
        if self.end_time is None:
            return seconds_between(self.start_time, now)
        if self.duration_seconds is not None:
            return max(0, int(self.duration_seconds))
        return seconds_between(self.start_time, self.end_time)


@dataclass(frozen=True)
class ClockResult:
    outcome: ClockOutcome
    interval: Optional[TimeInterval] = None
