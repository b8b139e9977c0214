from __future__ import annotations

from typing import Iterable, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import Driver
from .repository import DriverRepository


def _to_driver(r: dict) -> Driver:
    return Driver(
        driver_id=int(r["driver_id"]),
        full_name=r["full_name"],
        license_number=r.get("license_number"),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLDriverRepository(DriverRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[Driver]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT driver_id, full_name, license_number, is_active
                FROM drivers
                WHERE is_active=1
                ORDER BY full_name ASC
                """
            )
            return [_to_driver(r) for r in fetchall(cur)]

    def list_by_ids(self, driver_ids: Iterable[int]) -> Sequence[Driver]:
        ids = sorted({int(i) for i in driver_ids})
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT driver_id, full_name, license_number, is_active
                FROM drivers
                WHERE driver_id IN ({in_clause(ids)})
                ORDER BY full_name ASC
                """,
                tuple(ids),
            )
            return [_to_driver(r) for r in fetchall(cur)]
