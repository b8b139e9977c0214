from __future__ import annotations

from flask import Flask, request

from ..common.responses import error_response, ok
from ..common.validators import optional_date
from ..container import Container
from .model import GeoPoint


def register(app: Flask, container: Container) -> None:
    @app.route("/api/driver/attendance", methods=["POST"], endpoint="api_record_attendance")
    def api_record_attendance():
        data = request.get_json(silent=True) or {}
        try:
            record = container.attendance_tracker.record_attendance(
                student_id=data.get("student_id"),
                route_id=data.get("route_id"),
                route_stop_id=data.get("route_stop_id"),
                driver_id=data.get("driver_id"),
                status=data.get("status"),
                household_id=data.get("household_id"),
                location=GeoPoint.from_payload(data.get("latitude"), data.get("longitude")),
            )
        except Exception as e:
            return error_response(e, context="record attendance")

        return ok(
            {
                "attendance": {
                    "student_id": record.student_id,
                    "route_stop_id": record.route_stop_id,
                    "record_date": record.record_date.isoformat(),
                    "status": record.status.value,
                    "latitude": record.latitude,
                    "longitude": record.longitude,
                    "recorded_at": record.recorded_at.isoformat(),
                }
            }
        )

    @app.route("/api/driver/routes/<int:route_id>/completion", methods=["GET"], endpoint="api_route_completion")
    def api_route_completion(route_id: int):
        try:
            state = container.route_completion_service.get_route_completion_state(
                route_id,
                work_date=optional_date(request.args.get("date"), "date"),
            )
        except Exception as e:
            return error_response(e, context="route completion")

        return ok(
            {
                "route_id": state.route_id,
                "total_students": state.total_students,
                "confirmed_students": state.confirmed_students,
                "all_confirmed": state.all_confirmed,
                "can_complete": state.can_complete,
            }
        )

    @app.route("/api/driver/complete-route", methods=["POST"], endpoint="api_complete_route")
    def api_complete_route():
        data = request.get_json(silent=True) or {}
        try:
            completion = container.route_completion_service.mark_route_complete(
                data.get("route_id"),
                data.get("driver_id"),
            )
        except Exception as e:
            return error_response(e, context="complete route")

        return ok(
            {
                "route_id": completion.route_id,
                "driver_id": completion.driver_id,
                "work_date": completion.work_date.isoformat(),
                "completed_at": completion.completed_at.isoformat(),
            }
        )
