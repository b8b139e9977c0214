from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.locks import KeyedLock
from ..common.validators import optional_id, require_enum, require_id
from ..core.constants import DEFAULT_GEOLOCATION_TIMEOUT_SECONDS
from ..core.enums import AttendanceStatus
from ..core.exceptions import GuardError, NotFoundError, ValidationError
from ..routes.itinerary import ItineraryBuilder
from ..routes.model import StopView
from ..routes.repository import RouteRepository, RouteStopRepository
from .completion import RouteCompletionState, compute_completion_state
from .geolocation import LocationProvider, best_effort_location
from .model import AttendanceRecord, GeoPoint, RouteCompletion
from .repository import AttendanceRepository, RouteCompletionRepository
from .strategies.base import StatusPolicy
from .strategies.lenient_policy import LenientStatusPolicy

logger = logging.getLogger(__name__)


class AttendanceTracker:
    """Records per-stop student status.

    Location capture is best-effort: a missing or slow location never
    blocks the record. The HTTP endpoint passes the coordinates the
    device sent; `location_provider` is for in-process callers (a
    vehicle telematics feed, a kiosk) that look the position up
    themselves, and is only consulted when no location was given.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        stops: RouteStopRepository,
        *,
        policy: StatusPolicy | None = None,
        geolocation_timeout: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
    ):
        self._attendance = attendance
        self._stops = stops
        self._policy = policy or LenientStatusPolicy()
        self._geolocation_timeout = float(geolocation_timeout)

    def record_attendance(
        self,
        *,
        student_id: Any,
        route_id: Any,
        route_stop_id: Any,
        driver_id: Any,
        status: Any,
        household_id: Any = None,
        location: Optional[GeoPoint] = None,
        location_provider: Optional[LocationProvider] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        student_id = require_id(student_id, "student_id")
        route_id = require_id(route_id, "route_id")
        route_stop_id = require_id(route_stop_id, "route_stop_id")
        driver_id = require_id(driver_id, "driver_id")
        household_id = optional_id(household_id, "household_id")
        if not status:
            raise ValidationError("status is required")
        status = require_enum(AttendanceStatus, status, "status")

        stop = self._stops.get(route_stop_id)
        if stop is None:
            raise NotFoundError(f"Stop {route_stop_id} not found")
        if stop.route_id != route_id:
            raise ValidationError(f"Stop {route_stop_id} is not on route {route_id}")

        self._policy.check(status=status, stop_type=stop.stop_type)

        if location is None and location_provider is not None:
            location = best_effort_location(location_provider, timeout=self._geolocation_timeout)

        now = now or now_local()
        record = AttendanceRecord(
            student_id=student_id,
            route_id=route_id,
            route_stop_id=route_stop_id,
            driver_id=driver_id,
            record_date=now.date(),
            status=status,
            recorded_at=now,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            household_id=household_id,
        )
        saved = self._attendance.upsert(record)
        logger.info(
            "[Attendance] Student %s at stop %s (route %s): %s",
            student_id,
            route_stop_id,
            route_id,
            status.value,
        )
        return saved


class RouteCompletionService:
    """Guards "route complete" behind full attendance for the day."""

    def __init__(
        self,
        routes: RouteRepository,
        itinerary: ItineraryBuilder,
        attendance: AttendanceRepository,
        completions: RouteCompletionRepository,
        *,
        locks: KeyedLock | None = None,
    ):
        self._routes = routes
        self._itinerary = itinerary
        self._attendance = attendance
        self._completions = completions
        self._locks = locks or KeyedLock()

    def get_route_completion_state(self, route_id: Any, *, work_date: date | None = None) -> RouteCompletionState:
        route_id = require_id(route_id, "route_id")
        if self._routes.get_route(route_id) is None:
            raise NotFoundError(f"Route {route_id} not found")
        work_date = work_date or now_local().date()
        return self._state(route_id, self._itinerary.for_route(route_id), work_date)

    def can_complete(self, route_id: Any, stops: Sequence[StopView], *, work_date: date | None = None) -> bool:
        route_id = require_id(route_id, "route_id")
        work_date = work_date or now_local().date()
        return self._state(route_id, stops, work_date).can_complete

    def mark_route_complete(
        self,
        route_id: Any,
        driver_id: Any,
        *,
        work_date: date | None = None,
        now: datetime | None = None,
    ) -> RouteCompletion:
        route_id = require_id(route_id, "route_id")
        driver_id = require_id(driver_id, "driver_id")
        now = now or now_local()
        work_date = work_date or now.date()

        if self._routes.get_route(route_id) is None:
            raise NotFoundError(f"Route {route_id} not found")

        # Re-check inside the critical section; a client-side check is only advisory.
        with self._locks.hold((route_id, work_date)):
            with self._completions.critical_section(route_id=route_id, work_date=work_date):
                state = self._state(route_id, self._itinerary.for_route(route_id), work_date)
                if not state.can_complete:
                    remaining = state.total_students - state.confirmed_students
                    logger.info(
                        "[Completion] Route %s blocked for driver %s: %s of %s students unconfirmed",
                        route_id,
                        driver_id,
                        remaining,
                        state.total_students,
                    )
                    raise GuardError(f"Attendance still missing for {remaining} student(s)")

                completion = self._completions.upsert(
                    driver_id=driver_id,
                    route_id=route_id,
                    work_date=work_date,
                    completed_at=now,
                )

        logger.info("[Completion] Driver %s completed route %s for %s", driver_id, route_id, work_date)
        return completion

    def _state(self, route_id: int, stops: Sequence[StopView], work_date: date) -> RouteCompletionState:
        recorded = {r.key for r in self._attendance.list_for_route(route_id=route_id, record_date=work_date)}
        return compute_completion_state(route_id, stops, recorded)
