from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.responses import error_response, ok
from ..container import Container
from .model import RouteStop, StopView
from .service import stop_from_payload


def stop_json(stop: RouteStop) -> dict:
    return {
        "id": stop.stop_id,
        "route_id": stop.route_id,
        "sequence": stop.sequence,
        "stop_type": stop.stop_type.value,
        "student_id": stop.student_id,
        "school_id": stop.school_id,
        "household_id": stop.household_id,
        "address": stop.address,
        "planned_time": stop.planned_time.strftime("%H:%M:%S") if stop.planned_time else None,
        "notes": stop.notes,
    }


def stop_view_json(view: StopView) -> dict:
    return {
        "id": view.stop_id,
        "route_id": view.route_id,
        "sequence": view.sequence,
        "stop_type": view.stop_type.value,
        "address": view.address,
        "planned_time": view.planned_time.strftime("%H:%M:%S") if view.planned_time else None,
        "student_ids": list(view.student_ids),
        "student_names": list(view.student_names),
        "household_id": view.household_id,
        "school_name": view.school_name,
        "school_phone": view.school_phone,
        "guardian_name": view.guardian_name,
        "guardian_phone": view.guardian_phone,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/driver/routes", methods=["GET"], endpoint="api_driver_routes")
    def api_driver_routes():
        try:
            day = container.driver_day_service.todays_routes(request.args.get("driver_id"), now_local().date())
        except Exception as e:
            return error_response(e, context="driver routes")

        return ok(
            {
                "routes": [
                    {
                        "id": r.route.route_id,
                        "name": r.route.name,
                        "direction": r.route.direction.value,
                        "stops": [stop_view_json(v) for v in r.stops],
                    }
                    for r in day.routes
                ],
                "attendance": [
                    {"student_id": student_id, "route_stop_id": stop_id, "status": status}
                    for (student_id, stop_id), status in day.attendance.items()
                ],
                "total_route_counts": day.total_route_counts,
            }
        )

    @app.route("/api/admin/route-stops", methods=["GET"], endpoint="api_get_route_stops")
    def api_get_route_stops():
        try:
            stops = container.route_stop_service.get_route_stops(request.args.get("route_id"))
        except Exception as e:
            return error_response(e, context="route stops")
        return ok({"stops": [stop_json(s) for s in stops]})

    @app.route("/api/admin/route-stops", methods=["POST"], endpoint="api_add_route_stop")
    def api_add_route_stop():
        data = request.get_json(silent=True) or {}
        try:
            stop = container.route_stop_service.add_stop(data.get("route_id"), stop_from_payload(data))
        except Exception as e:
            return error_response(e, context="add stop")
        return ok({"stop": stop_json(stop)}, 201)

    @app.route("/api/admin/route-stops", methods=["DELETE"], endpoint="api_remove_route_stop")
    def api_remove_route_stop():
        data = request.get_json(silent=True) or {}
        try:
            container.route_stop_service.remove_stop(data.get("stop_id") or request.args.get("stop_id"))
        except Exception as e:
            return error_response(e, context="remove stop")
        return ok({"message": "Stop removed"})

    @app.route("/api/admin/route-stops/reorder", methods=["POST"], endpoint="api_reorder_route_stops")
    def api_reorder_route_stops():
        data = request.get_json(silent=True) or {}
        try:
            stops = container.route_stop_service.reorder_stops(
                data.get("route_id"),
                data.get("stop_id"),
                data.get("direction"),
                current_order=data.get("order"),
            )
        except Exception as e:
            return error_response(e, context="reorder stops")
        return ok({"stops": [stop_json(s) for s in stops]})

    @app.route("/api/admin/route-stops/order", methods=["PUT"], endpoint="api_save_route_stop_order")
    def api_save_route_stop_order():
        data = request.get_json(silent=True) or {}
        try:
            stops = container.route_stop_service.save_stop_order(data.get("route_id"), data.get("stops") or [])
        except Exception as e:
            return error_response(e, context="save stop order")
        return ok({"stops": [stop_json(s) for s in stops]})
