from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import TimeInterval
from .repository import TimeIntervalRepository

_COLUMNS = "interval_id, driver_id, work_date, start_time, end_time, duration_seconds"


def _to_interval(r: dict) -> TimeInterval:
    return TimeInterval(
        interval_id=int(r["interval_id"]),
        driver_id=int(r["driver_id"]),
        work_date=r["work_date"],
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        duration_seconds=int(r["duration_seconds"]) if r.get("duration_seconds") is not None else None,
    )


class MySQLTimeIntervalRepository(TimeIntervalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_open(self, *, driver_id: int, work_date: date) -> Optional[TimeInterval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM driver_time_intervals
                WHERE driver_id=%s AND work_date=%s AND end_time IS NULL
                ORDER BY start_time DESC
                LIMIT 1
                """,
                (int(driver_id), work_date),
            )
            r = fetchone(cur)
            return _to_interval(r) if r else None

    def insert_open(self, *, driver_id: int, work_date: date, start_time: datetime) -> Optional[TimeInterval]:
        # uq_one_open_interval rejects a second open row for the same driver/day,
        # so concurrent pre-trips land in the IntegrityError branch.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO driver_time_intervals(driver_id, work_date, start_time)
                    VALUES(%s,%s,%s)
                    """,
                    (int(driver_id), work_date, start_time),
                )
                interval_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                return None
            raise

        return TimeInterval(
            interval_id=interval_id,
            driver_id=int(driver_id),
            work_date=work_date,
            start_time=start_time,
        )

    def close(self, *, interval_id: int, end_time: datetime, duration_seconds: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE driver_time_intervals
                SET end_time=%s, duration_seconds=%s
                WHERE interval_id=%s AND end_time IS NULL
                """,
                (end_time, int(duration_seconds), int(interval_id)),
            )
            return cur.rowcount > 0

    def list_range(
        self,
        *,
        start: date,
        end: date,
        driver_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[TimeInterval]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]

        if driver_ids is not None:
            ids = sorted({int(i) for i in driver_ids})
            if not ids:
                return []
            clauses.append(f"driver_id IN ({in_clause(ids)})")
            params.extend(ids)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM driver_time_intervals
                WHERE {where}
                ORDER BY work_date DESC, start_time ASC
                """,
                tuple(params),
            )
            return [_to_interval(r) for r in fetchall(cur)]

    def list_open_for_date(self, *, work_date: date) -> Sequence[TimeInterval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM driver_time_intervals
                WHERE work_date=%s AND end_time IS NULL
                ORDER BY start_time ASC
                """,
                (work_date,),
            )
            return [_to_interval(r) for r in fetchall(cur)]
