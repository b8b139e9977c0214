from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import AttendanceStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    @classmethod
    def from_payload(cls, latitude: Any, longitude: Any) -> Optional["GeoPoint"]:
        """Coordinates from a request payload; None when missing or out of range."""

        if latitude in (None, "") or longitude in (None, ""):
            return None
        try:
            lat = float(latitude)
            lng = float(longitude)
        except (TypeError, ValueError):
            logger.warning("[Attendance] Ignoring malformed coordinates %r, %r", latitude, longitude)
            return None
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
            logger.warning("[Attendance] Ignoring out-of-range coordinates %s, %s", lat, lng)
            return None
        return cls(latitude=lat, longitude=lng)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: status of one student at one stop on one work-day.

    Keyed by (student_id, route_stop_id, record_date); a new submission
    for the same key replaces the previous one.
    """

    student_id: int
    route_id: int
    route_stop_id: int
    driver_id: int
    record_date: date
    status: AttendanceStatus
    recorded_at: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    household_id: Optional[int] = None

    @property
    def key(self) -> tuple[int, int]:
        return self.student_id, self.route_stop_id


@dataclass(frozen=True)
class RouteCompletion:
    driver_id: int
    route_id: int
    work_date: date
    completed_at: datetime
