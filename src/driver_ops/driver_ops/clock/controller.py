from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_duration, now_local
from ..common.responses import error_response, ok
from ..common.validators import optional_date, require_id
from ..core.exceptions import ValidationError
from ..container import Container
from .service import describe


def register(app: Flask, container: Container) -> None:
    @app.route("/api/driver/time", methods=["GET"], endpoint="api_driver_time")
    def api_driver_time():
        try:
            driver_id = require_id(request.args.get("driver_id"), "driver_id")
            now = now_local()
            status = container.timecard_aggregator.day_status(driver_id, now.date(), now)
        except Exception as e:
            return error_response(e, context="driver time")

        return ok(
            {
                "driver_id": status.driver_id,
                "work_date": status.work_date.isoformat(),
                "state": container.clock_controller.clock_state(driver_id, status.work_date).value,
                "base_seconds": status.base_seconds,
                "active_since": status.active_since.isoformat() if status.active_since else None,
                "total_seconds": status.total_seconds,
                "total": format_duration(status.total_seconds),
            }
        )

    @app.route("/api/driver/time", methods=["POST"], endpoint="api_driver_time_action")
    def api_driver_time_action():
        data = request.get_json(silent=True) or {}
        try:
            driver_id = require_id(data.get("driver_id"), "driver_id")
            action = (data.get("action") or "").strip().lower()
            if action == "pause":
                result = container.clock_controller.pause(driver_id)
            elif action == "resume":
                result = container.clock_controller.resume(driver_id)
            else:
                raise ValidationError("action must be 'pause' or 'resume'")
        except Exception as e:
            return error_response(e, context="driver time action")

        return ok({"clock": describe(result)})

    @app.route("/api/driver/time-entries", methods=["GET"], endpoint="api_driver_time_entries")
    def api_driver_time_entries():
        try:
            driver_id = require_id(request.args.get("driver_id"), "driver_id")
            today = now_local().date()
            start = optional_date(request.args.get("startDate"), "startDate") or today
            end = optional_date(request.args.get("endDate"), "endDate") or start
            intervals = container.timecard_aggregator.driver_intervals(driver_id, start, end)
        except Exception as e:
            return error_response(e, context="driver time entries")

        return ok(
            {
                "entries": [
                    {
                        "id": i.interval_id,
                        "work_date": i.work_date.isoformat(),
                        "start_time": i.start_time.isoformat(),
                        "end_time": i.end_time.isoformat() if i.end_time else None,
                        "duration_seconds": i.duration_seconds,
                    }
                    for i in intervals
                ]
            }
        )
