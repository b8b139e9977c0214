from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import School, Student
from .repository import DirectoryRepository

_STUDENT_COLUMNS = """
    student_id, full_name, household_id, school_id,
    pickup_address, pickup_city, pickup_state, pickup_zip,
    primary_guardian_name, primary_guardian_phone
"""


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        full_name=r["full_name"],
        household_id=int(r["household_id"]) if r.get("household_id") is not None else None,
        school_id=int(r["school_id"]) if r.get("school_id") is not None else None,
        pickup_address=r.get("pickup_address"),
        pickup_city=r.get("pickup_city"),
        pickup_state=r.get("pickup_state"),
        pickup_zip=r.get("pickup_zip"),
        primary_guardian_name=r.get("primary_guardian_name"),
        primary_guardian_phone=r.get("primary_guardian_phone"),
    )


class MySQLDirectoryRepository(DirectoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_student(self, student_id: int) -> Optional[Student]:
        return self.students_by_ids([student_id]).get(int(student_id))

    def students_by_ids(self, student_ids: Iterable[int]) -> Mapping[int, Student]:
        ids = sorted({int(i) for i in student_ids})
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_STUDENT_COLUMNS} FROM students WHERE student_id IN ({in_clause(ids)})",
                tuple(ids),
            )
            return {s.student_id: s for s in (_to_student(r) for r in fetchall(cur))}

    def schools_by_ids(self, school_ids: Iterable[int]) -> Mapping[int, School]:
        ids = sorted({int(i) for i in school_ids})
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT school_id, name, address, phone
                FROM schools
                WHERE school_id IN ({in_clause(ids)})
                """,
                tuple(ids),
            )
            return {
                int(r["school_id"]): School(
                    school_id=int(r["school_id"]),
                    name=r["name"],
                    address=r.get("address"),
                    phone=r.get("phone"),
                )
                for r in fetchall(cur)
            }
