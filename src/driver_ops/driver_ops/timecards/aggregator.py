from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..clock.model import TimeInterval
from ..clock.repository import TimeIntervalRepository
from ..common.datetime_utils import iter_dates
from ..core.exceptions import NotFoundError, ValidationError
from ..drivers.repository import DriverRepository
from .model import DayClockStatus, DayTimecardSummary, LiveClockEntry, WeekTimecardSummary

logger = logging.getLogger(__name__)


class TimecardAggregator:
    """Rebuilds daily/weekly totals from time intervals on every query.

    Nothing here is cached: an open interval counts up to the `now`
    passed in, so re-querying later yields a larger (live) total.
    """

    def __init__(self, intervals: TimeIntervalRepository, drivers: DriverRepository):
        self._intervals = intervals
        self._drivers = drivers

    def summarize(
        self,
        driver_ids: Optional[Iterable[int]],
        week_start: date,
        week_end: date,
        now: datetime,
    ) -> list[WeekTimecardSummary]:
        """Per-driver totals for every day in [week_start, week_end].

        driver_ids=None means the whole active roster. Every requested
        driver appears in the result, zero-hour drivers included; an id
        with no driver behind it is NotFoundError.
        """
        if week_end < week_start:
            raise ValidationError("weekEnd must not be before weekStart")

        if driver_ids is None:
            roster = list(self._drivers.list_active())
            ids = [d.driver_id for d in roster]
        else:
            ids = sorted({int(i) for i in driver_ids})
            roster = list(self._drivers.list_by_ids(ids))
            missing = sorted(set(ids) - {d.driver_id for d in roster})
            if missing:
                raise NotFoundError(f"No driver found for id(s) {', '.join(str(i) for i in missing)}")

        names = {d.driver_id: d.full_name for d in roster}
        days = list(iter_dates(week_start, week_end))

        daily: dict[int, dict[date, int]] = {i: {d: 0 for d in days} for i in ids}
        open_days: dict[int, set[date]] = {i: set() for i in ids}
        active_since: dict[int, Optional[datetime]] = {i: None for i in ids}

        rows = self._intervals.list_range(start=week_start, end=week_end, driver_ids=ids) if ids else []
        for interval in rows:
            per_day = daily.get(interval.driver_id)
            if per_day is None or interval.work_date not in per_day:
                continue
            per_day[interval.work_date] += interval.elapsed_seconds(now)
            if interval.is_open:
                open_days[interval.driver_id].add(interval.work_date)
                since = active_since[interval.driver_id]
                if since is None or interval.start_time > since:
                    active_since[interval.driver_id] = interval.start_time

        summaries = [
            WeekTimecardSummary(
                driver_id=i,
                full_name=names.get(i),
                week_start=week_start,
                week_end=week_end,
                days=[
                    DayTimecardSummary(work_date=d, total_seconds=daily[i][d], has_open_interval=d in open_days[i])
                    for d in days
                ],
                total_seconds=sum(daily[i].values()),
                active_since=active_since[i],
            )
            for i in ids
        ]
        summaries.sort(key=lambda s: ((s.full_name or "").lower(), s.driver_id))

        logger.debug(
            "[Timecards] Summarized %s drivers over %s..%s (%s intervals)",
            len(summaries),
            week_start,
            week_end,
            len(rows),
        )
        return summaries

    def day_status(self, driver_id: int, work_date: date, now: datetime) -> DayClockStatus:
        base = 0
        active_since: Optional[datetime] = None
        running = 0
        for interval in self._intervals.list_range(start=work_date, end=work_date, driver_ids=[driver_id]):
            if interval.is_open:
                active_since = interval.start_time
                running = interval.elapsed_seconds(now)
            else:
                base += interval.elapsed_seconds(now)

        return DayClockStatus(
            driver_id=driver_id,
            work_date=work_date,
            base_seconds=base,
            active_since=active_since,
            total_seconds=base + running,
        )

    def driver_intervals(self, driver_id: int, start: date, end: date) -> Sequence[TimeInterval]:
        if end < start:
            raise ValidationError("endDate must not be before startDate")
        return self._intervals.list_range(start=start, end=end, driver_ids=[driver_id])

    def live_clock(self, work_date: date, now: datetime) -> list[LiveClockEntry]:
        """Every active driver and whether they are on the clock right now."""

        open_by_driver: dict[int, TimeInterval] = {}
        for interval in self._intervals.list_open_for_date(work_date=work_date):
            open_by_driver[interval.driver_id] = interval

        entries = []
        for driver in self._drivers.list_active():
            interval = open_by_driver.get(driver.driver_id)
            entries.append(
                LiveClockEntry(
                    driver_id=driver.driver_id,
                    full_name=driver.full_name,
                    license_number=driver.license_number,
                    clocked_in=interval is not None,
                    active_since=interval.start_time if interval else None,
                    running_seconds=interval.elapsed_seconds(now) if interval else 0,
                )
            )

        entries.sort(key=lambda e: (not e.clocked_in, e.full_name.lower()))
        return entries
