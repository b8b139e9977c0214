from __future__ import annotations

from datetime import date, datetime
from typing import ContextManager, Protocol, Sequence

from .model import AttendanceRecord, RouteCompletion


class AttendanceRepository(Protocol):
    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert or replace the record for (student_id, route_stop_id, record_date)."""

        raise NotImplementedError

    def list_for_route(self, *, route_id: int, record_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_driver(self, *, driver_id: int, record_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError


class RouteCompletionRepository(Protocol):
    def critical_section(self, *, route_id: int, work_date: date) -> ContextManager[None]:
        """Serialize completion attempts for one route/day across processes."""

        raise NotImplementedError

    def upsert(self, *, driver_id: int, route_id: int, work_date: date, completed_at: datetime) -> RouteCompletion:
        raise NotImplementedError

    def completed_route_ids(self, *, driver_id: int, work_date: date) -> Sequence[int]:
        raise NotImplementedError
