from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local, seconds_between
from ..common.locks import KeyedLock
from ..core.enums import ClockEvent, ClockOutcome, ClockState, InspectionType
from ..core.exceptions import ConflictError, NotFoundError
from .model import ClockResult
from .repository import TimeIntervalRepository
from .state_machine import ClockStateMachine, state_of

logger = logging.getLogger(__name__)


class ClockSessionController:
    """Opens and closes a driver's paid-time interval.

    Inspection submissions drive the clock tolerantly (repeat pre-trips and
    orphan post-trips are no-ops); manual pause/resume are strict.
    """

    def __init__(
        self,
        intervals: TimeIntervalRepository,
        *,
        machine: ClockStateMachine | None = None,
        locks: KeyedLock | None = None,
    ):
        self._intervals = intervals
        self._machine = machine or ClockStateMachine()
        self._locks = locks or KeyedLock()

    def on_inspection_submitted(
        self,
        driver_id: int,
        inspection_type: InspectionType,
        work_date: date,
        now: datetime,
    ) -> ClockResult:
        if inspection_type == InspectionType.PRE:
            return self._clock_in(driver_id, work_date, now, strict=False)
        return self._clock_out(driver_id, work_date, now, strict=False)

    def pause(self, driver_id: int, *, now: datetime | None = None) -> ClockResult:
        now = now or now_local()
        return self._clock_out(driver_id, now.date(), now, strict=True)

    def resume(self, driver_id: int, *, now: datetime | None = None) -> ClockResult:
        now = now or now_local()
        return self._clock_in(driver_id, now.date(), now, strict=True)

    def clock_state(self, driver_id: int, work_date: date) -> ClockState:
        return state_of(self._intervals.find_open(driver_id=driver_id, work_date=work_date))

    def _clock_in(self, driver_id: int, work_date: date, now: datetime, *, strict: bool) -> ClockResult:
        now = now.replace(microsecond=0)
        with self._locks.hold((driver_id, work_date)):
            current = self._intervals.find_open(driver_id=driver_id, work_date=work_date)
            transition = self._machine.transition(state_of(current), ClockEvent.CLOCK_IN, strict=strict)
            if not transition.changed:
                return ClockResult(outcome=ClockOutcome.ALREADY_OPEN, interval=current)

            created = self._intervals.insert_open(driver_id=driver_id, work_date=work_date, start_time=now)
            if created is None:
                # Another process opened one between our lookup and insert.
                if strict:
                    raise ConflictError("An open time entry already exists")
                logger.info("[Clock] Driver %s already clocked in for %s (concurrent)", driver_id, work_date)
                return ClockResult(
                    outcome=ClockOutcome.ALREADY_OPEN,
                    interval=self._intervals.find_open(driver_id=driver_id, work_date=work_date),
                )

        logger.info("[Clock] Driver %s clocked in for %s at %s", driver_id, work_date, now.isoformat())
        return ClockResult(outcome=ClockOutcome.OPENED, interval=created)

    def _clock_out(self, driver_id: int, work_date: date, now: datetime, *, strict: bool) -> ClockResult:
        # DATETIME columns hold whole seconds; stored bounds and duration must agree.
        now = now.replace(microsecond=0)
        with self._locks.hold((driver_id, work_date)):
            current = self._intervals.find_open(driver_id=driver_id, work_date=work_date)
            transition = self._machine.transition(state_of(current), ClockEvent.CLOCK_OUT, strict=strict)
            if not transition.changed:
                logger.info("[Clock] Driver %s has no open interval on %s; nothing to close", driver_id, work_date)
                return ClockResult(outcome=ClockOutcome.NOTHING_OPEN)

            duration = seconds_between(current.start_time, now)
            if not self._intervals.close(interval_id=current.interval_id, end_time=now, duration_seconds=duration):
                if strict:
                    raise NotFoundError("No open time entry found to pause")
                return ClockResult(outcome=ClockOutcome.NOTHING_OPEN)

        logger.info("[Clock] Driver %s clocked out for %s after %ss", driver_id, work_date, duration)
        closed = replace(current, end_time=now, duration_seconds=duration)
        return ClockResult(outcome=ClockOutcome.CLOSED, interval=closed)


def describe(result: Optional[ClockResult]) -> Optional[dict]:
    """JSON-friendly view of a clock result."""
    if result is None:
        return None
    interval = result.interval
    return {
        "outcome": result.outcome.value,
        "interval_id": interval.interval_id if interval else None,
        "start_time": interval.start_time.isoformat() if interval else None,
        "end_time": interval.end_time.isoformat() if interval and interval.end_time else None,
        "duration_seconds": interval.duration_seconds if interval else None,
    }
