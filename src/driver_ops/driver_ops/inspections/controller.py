from __future__ import annotations

from flask import Flask, request

from ..clock.service import describe
from ..common.responses import error_response, ok
from ..common.validators import optional_date
from ..container import Container
from .model import Inspection


def _inspection_json(inspection: Inspection) -> dict:
    return {
        "id": inspection.inspection_id,
        "driver_id": inspection.driver_id,
        "vehicle_id": inspection.vehicle_id,
        "inspection_type": inspection.inspection_type.value,
        "inspection_date": inspection.inspection_date.isoformat(),
        "submitted_at": inspection.submitted_at.isoformat(),
        "driver_name": inspection.driver_name,
        "vehicle_label": inspection.vehicle_label,
        "shift": inspection.shift,
        "answers": inspection.answers,
        "overall_status": inspection.overall_status,
        "notes": inspection.notes,
        "signature_name": inspection.signature_name,
        "odometer_reading": inspection.odometer_reading,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/driver/inspections", methods=["POST"], endpoint="api_submit_inspection")
    def api_submit_inspection():
        data = request.get_json(silent=True) or {}
        try:
            submission = container.inspection_service.submit_inspection(
                driver_id=data.get("driver_id"),
                vehicle_id=data.get("vehicle_id"),
                inspection_type=data.get("inspection_type"),
                shift=data.get("shift"),
                answers=data.get("answers"),
                overall_status=data.get("overall_status"),
                notes=data.get("notes"),
                signature_name=data.get("signature_name"),
                odometer_reading=data.get("odometer_reading"),
                driver_name=data.get("driver_name"),
                vehicle_label=data.get("vehicle_label"),
            )
        except Exception as e:
            return error_response(e, context="submit inspection")

        return ok(
            {
                "inspection": _inspection_json(submission.inspection),
                "clock": describe(submission.clock),
                "clock_error": submission.clock_error,
            },
            201,
        )

    @app.route("/api/driver/inspections", methods=["GET"], endpoint="api_inspection_history")
    def api_inspection_history():
        try:
            inspections = container.inspection_service.inspection_history(
                request.args.get("driver_id"),
                on_date=optional_date(request.args.get("date"), "date"),
                inspection_type=request.args.get("type"),
                shift=request.args.get("shift"),
            )
        except Exception as e:
            return error_response(e, context="inspection history")

        return ok({"inspections": [_inspection_json(i) for i in inspections]})
