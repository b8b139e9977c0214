from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord, RouteCompletion
from .repository import AttendanceRepository, RouteCompletionRepository

_COLUMNS = """
    student_id, route_id, route_stop_id, household_id, driver_id, record_date,
    status, latitude, longitude, recorded_at
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        student_id=int(r["student_id"]),
        route_id=int(r["route_id"]),
        route_stop_id=int(r["route_stop_id"]),
        driver_id=int(r["driver_id"]),
        record_date=r["record_date"],
        status=AttendanceStatus(r["status"]),
        recorded_at=r["recorded_at"],
        latitude=float(r["latitude"]) if r.get("latitude") is not None else None,
        longitude=float(r["longitude"]) if r.get("longitude") is not None else None,
        household_id=int(r["household_id"]) if r.get("household_id") is not None else None,
    )



class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    student_id, route_id, route_stop_id, household_id, driver_id,
                    record_date, status, latitude, longitude, recorded_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    route_id=VALUES(route_id),
                    household_id=VALUES(household_id),
                    driver_id=VALUES(driver_id),
                    status=VALUES(status),
                    latitude=VALUES(latitude),
                    longitude=VALUES(longitude),
                    recorded_at=VALUES(recorded_at)
                """,
                (
                    record.student_id,
                    record.route_id,
                    record.route_stop_id,
                    record.household_id,
                    record.driver_id,
                    record.record_date,
                    record.status.value,
                    record.latitude,
                    record.longitude,
                    record.recorded_at,
                ),
            )
        return record

    def list_for_route(self, *, route_id: int, record_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE route_id=%s AND record_date=%s
                ORDER BY recorded_at ASC
                """,
                (int(route_id), record_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_driver(self, *, driver_id: int, record_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE driver_id=%s AND record_date=%s
                ORDER BY recorded_at ASC
                """,
                (int(driver_id), record_date),
            )
            return [_to_record(r) for r in fetchall(cur)]


class MySQLRouteCompletionRepository(RouteCompletionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def critical_section(self, *, route_id: int, work_date: date) -> Iterator[None]:
        # The route row lock is held until this transaction ends.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT route_id FROM routes WHERE route_id=%s FOR UPDATE", (int(route_id),))
            fetchall(cur)
            yield

    def upsert(self, *, driver_id: int, route_id: int, work_date: date, completed_at: datetime) -> RouteCompletion:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO driver_route_completions(driver_id, route_id, work_date, completed_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE completed_at=VALUES(completed_at)
                """,
                (int(driver_id), int(route_id), work_date, completed_at),
            )
        return RouteCompletion(
            driver_id=int(driver_id),
            route_id=int(route_id),
            work_date=work_date,
            completed_at=completed_at,
        )

    def completed_route_ids(self, *, driver_id: int, work_date: date) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT route_id
                FROM driver_route_completions
                WHERE driver_id=%s AND work_date=%s
                """,
                (int(driver_id), work_date),
            )
            return [int(r["route_id"]) for r in fetchall(cur)]
