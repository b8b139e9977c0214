from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import RouteDirection, StopType
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import Route, RouteStop, StopDraft
from .repository import RouteRepository, RouteStopRepository

_STOP_COLUMNS = """
    stop_id, route_id, sequence, stop_type, student_id, school_id, household_id,
    address, planned_time, notes
"""


def _optional_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def _to_route(r: dict) -> Route:
    return Route(
        route_id=int(r["route_id"]),
        name=r["name"],
        direction=RouteDirection(r.get("direction") or RouteDirection.AM.value),
        is_active=bool(r.get("is_active", True)),
    )


def _to_stop(r: dict) -> RouteStop:
    return RouteStop(
        stop_id=int(r["stop_id"]),
        route_id=int(r["route_id"]),
        sequence=int(r["sequence"]),
        stop_type=StopType(r.get("stop_type") or StopType.OTHER.value),
        student_id=_optional_int(r.get("student_id")),
        school_id=_optional_int(r.get("school_id")),
        household_id=_optional_int(r.get("household_id")),
        address=r.get("address"),
        planned_time=normalize_mysql_time(r.get("planned_time")),
        notes=r.get("notes"),
    )


class MySQLRouteRepository(RouteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_route(self, route_id: int) -> Optional[Route]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT route_id, name, direction, is_active FROM routes WHERE route_id=%s",
                (int(route_id),),
            )
            r = fetchone(cur)
            return _to_route(r) if r else None

    def routes_by_ids(self, route_ids: Iterable[int]) -> Sequence[Route]:
        ids = sorted({int(i) for i in route_ids})
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT route_id, name, direction, is_active
                FROM routes
                WHERE route_id IN ({in_clause(ids)})
                ORDER BY name ASC
                """,
                tuple(ids),
            )
            return [_to_route(r) for r in fetchall(cur)]

    def assigned_route_ids(self, *, driver_id: int, day_of_week: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT route_id
                FROM driver_route_assignments
                WHERE driver_id=%s AND day_of_week=%s
                """,
                (int(driver_id), int(day_of_week)),
            )
            return [int(r["route_id"]) for r in fetchall(cur)]


class MySQLRouteStopRepository(RouteStopRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, stop_id: int) -> Optional[RouteStop]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STOP_COLUMNS} FROM route_stops WHERE stop_id=%s", (int(stop_id),))
            r = fetchone(cur)
            return _to_stop(r) if r else None

    def list_for_route(self, route_id: int) -> Sequence[RouteStop]:
        return self.list_for_routes([route_id])

    def list_for_routes(self, route_ids: Iterable[int]) -> Sequence[RouteStop]:
        ids = sorted({int(i) for i in route_ids})
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STOP_COLUMNS}
                FROM route_stops
                WHERE route_id IN ({in_clause(ids)})
                ORDER BY route_id ASC, sequence ASC, stop_id ASC
                """,
                tuple(ids),
            )
            return [_to_stop(r) for r in fetchall(cur)]

    def insert(self, *, route_id: int, sequence: int, draft: StopDraft) -> RouteStop:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO route_stops(
                    route_id, sequence, stop_type, student_id, school_id, household_id,
                    address, planned_time, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(route_id),
                    int(sequence),
                    draft.stop_type.value,
                    draft.student_id,
                    draft.school_id,
                    draft.household_id,
                    draft.address,
                    draft.planned_time,
                    draft.notes,
                ),
            )
            stop_id = int(cur.lastrowid)

        return RouteStop(
            stop_id=stop_id,
            route_id=int(route_id),
            sequence=int(sequence),
            stop_type=draft.stop_type,
            student_id=draft.student_id,
            school_id=draft.school_id,
            household_id=draft.household_id,
            address=draft.address,
            planned_time=draft.planned_time,
            notes=draft.notes,
        )

    def delete(self, stop_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM route_stops WHERE stop_id=%s", (int(stop_id),))
            return cur.rowcount > 0

    def save_order(self, *, route_id: int, stops: Sequence[RouteStop]) -> None:
        # One transaction: lock the route's stop rows, verify membership, then rewrite.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT stop_id FROM route_stops WHERE route_id=%s FOR UPDATE",
                (int(route_id),),
            )
            existing = {int(r["stop_id"]) for r in fetchall(cur)}

            missing = [s.stop_id for s in stops if s.stop_id not in existing]
            if missing:
                raise NotFoundError(f"Stops not on route {route_id}: {', '.join(map(str, missing))}")

            for stop in stops:
                cur.execute(
                    """
                    UPDATE route_stops
                    SET sequence=%s, stop_type=%s, student_id=%s, school_id=%s, household_id=%s,
                        address=%s, planned_time=%s, notes=%s
                    WHERE stop_id=%s AND route_id=%s
                    """,
                    (
                        int(stop.sequence),
                        stop.stop_type.value,
                        stop.student_id,
                        stop.school_id,
                        stop.household_id,
                        stop.address,
                        stop.planned_time,
                        stop.notes,
                        int(stop.stop_id),
                        int(route_id),
                    ),
                )
