from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from .model import TimeInterval


class TimeIntervalRepository(Protocol):
    def find_open(self, *, driver_id: int, work_date: date) -> Optional[TimeInterval]:
        """Most recent open interval for the driver/work-day."""

        raise NotImplementedError

    def insert_open(self, *, driver_id: int, work_date: date, start_time: datetime) -> Optional[TimeInterval]:
        """Conditional insert: create an open interval unless one already exists.

        Returns None when the driver/work-day already has an open interval.
        Check and insert must be atomic against concurrent callers.
        """

        raise NotImplementedError

    def close(self, *, interval_id: int, end_time: datetime, duration_seconds: int) -> bool:
        """Close an interval that is still open. False if it was already closed."""

        raise NotImplementedError

    def list_range(
        self,
        *,
        start: date,
        end: date,
        driver_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[TimeInterval]:
        """Intervals with work_date in [start, end]; all drivers when driver_ids is None."""

        raise NotImplementedError

    def list_open_for_date(self, *, work_date: date) -> Sequence[TimeInterval]:
        raise NotImplementedError
