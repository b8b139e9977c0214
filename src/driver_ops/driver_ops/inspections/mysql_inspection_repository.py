from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import InspectionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, load_json
from .model import Inspection, NewInspection
from .repository import InspectionRepository


class MySQLInspectionRepository(InspectionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, new: NewInspection) -> Inspection:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO inspections(
                    driver_id, driver_name, vehicle_id, vehicle_label, inspection_type, shift,
                    answers, overall_status, notes, signature_name, odometer_reading,
                    submitted_at, inspection_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    new.driver_id,
                    new.driver_name,
                    new.vehicle_id,
                    new.vehicle_label,
                    new.inspection_type.value,
                    new.shift,
                    json.dumps(new.answers or {}),
                    new.overall_status,
                    new.notes,
                    new.signature_name,
                    new.odometer_reading,
                    new.submitted_at,
                    new.inspection_date,
                ),
            )
            inspection_id = int(cur.lastrowid)

        return Inspection(inspection_id=inspection_id, **asdict(new))

    def list_for_driver(
        self,
        *,
        driver_id: int,
        on_date: Optional[date] = None,
        since: Optional[datetime] = None,
        inspection_type: Optional[InspectionType] = None,
        shift: Optional[str] = None,
    ) -> Sequence[Inspection]:
        clauses = ["driver_id=%s"]
        params: list[object] = [int(driver_id)]

        if on_date is not None:
            clauses.append("inspection_date=%s")
            params.append(on_date)
        if since is not None:
            clauses.append("submitted_at >= %s")
            params.append(since)
        if inspection_type is not None:
            clauses.append("inspection_type=%s")
            params.append(inspection_type.value)
        if shift:
            clauses.append("shift=%s")
            params.append(shift)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    inspection_id, driver_id, driver_name, vehicle_id, vehicle_label,
                    inspection_type, shift, answers, overall_status, notes,
                    signature_name, odometer_reading, submitted_at, inspection_date
                FROM inspections
                WHERE {where}
                ORDER BY submitted_at DESC
                """,
                tuple(params),
            )
            return [
                Inspection(
                    inspection_id=int(r["inspection_id"]),
                    driver_id=int(r["driver_id"]),
                    vehicle_id=int(r["vehicle_id"]),
                    inspection_type=InspectionType(r["inspection_type"]),
                    submitted_at=r["submitted_at"],
                    inspection_date=r["inspection_date"],
                    driver_name=r.get("driver_name"),
                    vehicle_label=r.get("vehicle_label"),
                    shift=r.get("shift"),
                    answers=load_json(r.get("answers")),
                    overall_status=r.get("overall_status"),
                    notes=r.get("notes"),
                    signature_name=r.get("signature_name"),
                    odometer_reading=int(r["odometer_reading"]) if r.get("odometer_reading") is not None else None,
                )
                for r in fetchall(cur)
            ]
