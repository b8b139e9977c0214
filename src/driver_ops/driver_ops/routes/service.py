from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..attendance.repository import AttendanceRepository, RouteCompletionRepository
from ..common.datetime_utils import js_weekday
from ..common.validators import clean_optional, optional_id, require_enum, require_id
from ..core.enums import MoveDirection, RouteDirection, StopType
from ..core.exceptions import NotFoundError, ValidationError
from ..directory.repository import DirectoryRepository
from .itinerary import ItineraryBuilder
from .model import DriverDay, DriverRoute, RouteStop, StopDraft
from .repository import RouteRepository, RouteStopRepository
from .sequencer import StopSequence

logger = logging.getLogger(__name__)


def parse_planned_time(value: Any) -> Optional[time]:
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    text = str(value).strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValidationError("planned_time must be HH:MM or HH:MM:SS")


def _field_values(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Typed values for the editable fields present in a payload."""

    values: dict[str, Any] = {}
    if "stop_type" in payload:
        values["stop_type"] = require_enum(StopType, payload["stop_type"] or StopType.OTHER.value, "stop_type")
    for key in ("student_id", "school_id", "household_id"):
        if key in payload:
            values[key] = optional_id(payload[key], key)
    for key in ("address", "notes"):
        if key in payload:
            values[key] = clean_optional(payload[key])
    if "planned_time" in payload:
        values["planned_time"] = parse_planned_time(payload["planned_time"])
    return values


def stop_from_payload(payload: Mapping[str, Any]) -> StopDraft:
    values = _field_values(payload)
    values.setdefault("stop_type", StopType.OTHER)
    return StopDraft(**values)


class RouteStopService:
    """Admin editing of a route's stops.

    Reordering happens against an in-memory list; only `save_stop_order`
    writes positions, renumbering 1..N from the order it is given.
    """

    def __init__(self, routes: RouteRepository, stops: RouteStopRepository, directory: DirectoryRepository):
        self._routes = routes
        self._stops = stops
        self._directory = directory

    def get_route_stops(self, route_id: Any) -> list[RouteStop]:
        route_id = self._require_route(route_id)
        return StopSequence.from_stored(self._stops.list_for_route(route_id)).stops()

    def add_stop(self, route_id: Any, draft: StopDraft) -> RouteStop:
        route_id = self._require_route(route_id)

        if draft.stop_type.needs_student and draft.student_id is None:
            raise ValidationError("A student is required for this stop type")

        if draft.student_id is not None:
            student = self._directory.get_student(draft.student_id)
            if student is None:
                raise NotFoundError(f"Student {draft.student_id} not found")
            school_id = draft.school_id
            if draft.stop_type.is_school and school_id is None:
                school_id = student.school_id
            draft = replace(
                draft,
                school_id=school_id,
                household_id=draft.household_id or student.household_id,
            )

        sequence = StopSequence(self._stops.list_for_route(route_id)).next_sequence()
        stop = self._stops.insert(route_id=route_id, sequence=sequence, draft=draft)
        logger.info("[Stops] Added %s stop %s to route %s at #%s", stop.stop_type.value, stop.stop_id, route_id, sequence)
        return stop

    def remove_stop(self, stop_id: Any) -> None:
        stop_id = require_id(stop_id, "stop_id")
        if not self._stops.delete(stop_id):
            raise NotFoundError(f"Stop {stop_id} not found")
        logger.info("[Stops] Removed stop %s", stop_id)

    def reorder_stops(
        self,
        route_id: Any,
        stop_id: Any,
        direction: Any,
        current_order: Optional[Iterable[Any]] = None,
    ) -> list[RouteStop]:
        """Move one stop up/down in the editor's order. Nothing is persisted."""

        route_id = self._require_route(route_id)
        stop_id = require_id(stop_id, "stop_id")
        direction = require_enum(MoveDirection, direction, "direction")

        sequence = StopSequence.from_stored(self._stops.list_for_route(route_id))
        if current_order:
            sequence.arrange(require_id(i, "stop_id") for i in current_order)
        sequence.move(stop_id, direction)
        return sequence.stops()

    def save_stop_order(self, route_id: Any, stops: Sequence[Mapping[str, Any]]) -> list[RouteStop]:
        """Persist the given order (and any edited fields) as sequence 1..N.

        The order is taken as-is from the caller. Stops on the route that
        are not listed keep their relative order after the listed ones.
        """

        route_id = self._require_route(route_id)
        if not stops:
            raise ValidationError("No stops to save")
        if not all(isinstance(item, Mapping) for item in stops):
            raise ValidationError("Each stop must be an object with a stop_id")

        ordered_ids = [require_id(item.get("stop_id"), "stop_id") for item in stops]
        if len(set(ordered_ids)) != len(ordered_ids):
            raise ValidationError("Each stop may appear only once")

        sequence = StopSequence.from_stored(self._stops.list_for_route(route_id))
        sequence.arrange(ordered_ids)

        edits = {stop_id: _field_values(item) for stop_id, item in zip(ordered_ids, stops)}
        renumbered = [replace(stop, **edits.get(stop.stop_id, {})) for stop in sequence.renumbered()]

        self._stops.save_order(route_id=route_id, stops=renumbered)
        logger.info("[Stops] Saved order of %s stops on route %s", len(renumbered), route_id)
        return renumbered

    def _require_route(self, route_id: Any) -> int:
        route_id = require_id(route_id, "route_id")
        if self._routes.get_route(route_id) is None:
            raise NotFoundError(f"Route {route_id} not found")
        return route_id


class DriverDayService:
    """What a driver sees for today: routes, grouped stops and attendance so far."""

    def __init__(
        self,
        routes: RouteRepository,
        itinerary: ItineraryBuilder,
        attendance: AttendanceRepository,
        completions: RouteCompletionRepository,
    ):
        self._routes = routes
        self._itinerary = itinerary
        self._attendance = attendance
        self._completions = completions

    def todays_routes(self, driver_id: Any, today: date) -> DriverDay:
        driver_id = require_id(driver_id, "driver_id")

        assigned = self._routes.assigned_route_ids(driver_id=driver_id, day_of_week=js_weekday(today))
        active = [r for r in self._routes.routes_by_ids(assigned) if r.is_active]

        counts = {
            "am": sum(1 for r in active if r.direction in (RouteDirection.AM, RouteDirection.MIDDAY)),
            "pm": sum(1 for r in active if r.direction == RouteDirection.PM),
        }

        completed = set(self._completions.completed_route_ids(driver_id=driver_id, work_date=today))
        remaining = [r for r in active if r.route_id not in completed]

        views = self._itinerary.for_routes(r.route_id for r in remaining)
        attendance = {
            record.key: record.status.value
            for record in self._attendance.list_for_driver(driver_id=driver_id, record_date=today)
        }

        logger.debug(
            "[Stops] Driver %s has %s of %s routes left on %s",
            driver_id,
            len(remaining),
            len(active),
            today,
        )
        return DriverDay(
            routes=[DriverRoute(route=r, stops=views.get(r.route_id, [])) for r in remaining],
            attendance=attendance,
            total_route_counts=counts,
        )
