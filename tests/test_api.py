from __future__ import annotations

import pytest
from flask import Flask

from src.driver_ops.driver_ops.attendance.controller import register as register_attendance
from src.driver_ops.driver_ops.attendance.service import AttendanceTracker, RouteCompletionService
from src.driver_ops.driver_ops.clock.controller import register as register_clock
from src.driver_ops.driver_ops.clock.service import ClockSessionController
from src.driver_ops.driver_ops.container import Container
from src.driver_ops.driver_ops.core.enums import StopType, Weekday
from src.driver_ops.driver_ops.inspections.controller import register as register_inspections
from src.driver_ops.driver_ops.inspections.service import InspectionService
from src.driver_ops.driver_ops.routes.controller import register as register_routes
from src.driver_ops.driver_ops.routes.itinerary import ItineraryBuilder
from src.driver_ops.driver_ops.routes.model import Route, RouteStop
from src.driver_ops.driver_ops.routes.service import DriverDayService, RouteStopService
from src.driver_ops.driver_ops.timecards.aggregator import TimecardAggregator
from src.driver_ops.driver_ops.timecards.controller import register as register_timecards


@pytest.fixture
def client(intervals, roster, directory, inspections_repo, routes_repo, stops_repo, attendance_repo, completions_repo):
    routes_repo.add(Route(route_id=1, name="North AM"), driver_id=1, days=range(7))
    stops_repo.add(
        RouteStop(stop_id=1, route_id=1, sequence=1, stop_type=StopType.PICKUP_HOME, student_id=12),
        RouteStop(stop_id=2, route_id=1, sequence=2, stop_type=StopType.OTHER, address="Depot"),
    )

    clock = ClockSessionController(intervals)
    itinerary = ItineraryBuilder(stops_repo, directory)
    container = Container(
        conn=None,
        drivers_repo=roster,
        directory_repo=directory,
        intervals_repo=intervals,
        inspections_repo=inspections_repo,
        routes_repo=routes_repo,
        stops_repo=stops_repo,
        attendance_repo=attendance_repo,
        completions_repo=completions_repo,
        clock_controller=clock,
        timecard_aggregator=TimecardAggregator(intervals, roster),
        inspection_service=InspectionService(inspections_repo, clock),
        route_stop_service=RouteStopService(routes_repo, stops_repo, directory),
        driver_day_service=DriverDayService(routes_repo, itinerary, attendance_repo, completions_repo),
        attendance_tracker=AttendanceTracker(attendance_repo, stops_repo),
        route_completion_service=RouteCompletionService(routes_repo, itinerary, attendance_repo, completions_repo),
        week_starts_on=Weekday.MONDAY,
        week_display_days=5,
    )

    app = Flask(__name__)
    for register in (register_inspections, register_clock, register_timecards, register_routes, register_attendance):
        register(app, container)
    return app.test_client()


def test_pre_trip_inspection_starts_the_clock(client):
    resp = client.post("/api/driver/inspections", json={"driver_id": 1, "vehicle_id": 4, "inspection_type": "pre"})

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["clock"]["outcome"] == "opened"

    status = client.get("/api/driver/time?driver_id=1").get_json()
    assert status["state"] == "clocked_in"


def test_missing_vehicle_is_a_validation_error(client):
    resp = client.post("/api/driver/inspections", json={"driver_id": 1, "inspection_type": "pre"})

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "No vehicle selected"}


def test_manual_resume_twice_is_a_conflict(client):
    assert client.post("/api/driver/time", json={"driver_id": 1, "action": "resume"}).status_code == 200

    resp = client.post("/api/driver/time", json={"driver_id": 1, "action": "resume"})

    assert resp.status_code == 409


def test_pause_without_open_entry_is_not_found(client):
    assert client.post("/api/driver/time", json={"driver_id": 1, "action": "pause"}).status_code == 404


def test_timecards_include_zero_hour_drivers(client):
    body = client.get("/api/admin/timecards").get_json()

    assert [t["driver_id"] for t in body["timecards"]] == [2, 1]
    assert all(t["total"] == "00:00:00" for t in body["timecards"])
    assert len(body["timecards"][0]["days"]) == 5


def test_timecards_week_start_alone_spans_the_display_week(client):
    body = client.get("/api/admin/timecards?weekStart=2025-01-06").get_json()

    assert body["week_start"] == "2025-01-06"
    assert body["week_end"] == "2025-01-10"
    assert len(body["timecards"][0]["days"]) == 5


def test_timecards_for_unknown_driver_is_not_found(client):
    resp = client.get("/api/admin/timecards?driverIds=999&weekStart=2026-03-02&weekEnd=2026-03-06")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_live_timecards(client):
    client.post("/api/driver/time", json={"driver_id": 2, "action": "resume"})

    body = client.get("/api/admin/timecards?mode=live").get_json()

    assert body["drivers"][0]["driver_id"] == 2
    assert body["drivers"][0]["clocked_in"] is True


def test_route_completion_is_guarded_until_attendance_recorded(client):
    assert client.get("/api/driver/routes/1/completion").get_json()["can_complete"] is False
    assert client.post("/api/driver/complete-route", json={"route_id": 1, "driver_id": 1}).status_code == 422

    recorded = client.post(
        "/api/driver/attendance",
        json={"student_id": 12, "route_id": 1, "route_stop_id": 1, "driver_id": 1, "status": "picked_up", "latitude": "x"},
    )
    assert recorded.status_code == 200
    assert recorded.get_json()["attendance"]["latitude"] is None

    assert client.post("/api/driver/complete-route", json={"route_id": 1, "driver_id": 1}).status_code == 200
    assert client.get("/api/driver/routes?driver_id=1").get_json()["routes"] == []


def test_driver_routes_lists_grouped_stops(client):
    body = client.get("/api/driver/routes?driver_id=1").get_json()

    (route,) = body["routes"]
    assert [s["id"] for s in route["stops"]] == [1, 2]
    assert route["stops"][0]["student_ids"] == [12]
    assert body["total_route_counts"] == {"am": 1, "pm": 0}


def test_stop_admin_round_trip(client):
    added = client.post("/api/admin/route-stops", json={"route_id": 1, "stop_type": "other", "address": "Fuel"})
    assert added.status_code == 201
    new_id = added.get_json()["stop"]["id"]

    moved = client.post("/api/admin/route-stops/reorder", json={"route_id": 1, "stop_id": new_id, "direction": "up"})
    order = [s["id"] for s in moved.get_json()["stops"]]
    assert order == [1, new_id, 2]

    saved = client.put("/api/admin/route-stops/order", json={"route_id": 1, "stops": [{"stop_id": i} for i in order]})
    assert [s["sequence"] for s in saved.get_json()["stops"]] == [1, 2, 3]

    assert client.delete("/api/admin/route-stops", json={"stop_id": new_id}).status_code == 200
    listed = client.get("/api/admin/route-stops?route_id=1").get_json()["stops"]
    assert [s["id"] for s in listed] == [1, 2]


def test_saving_no_stops_is_rejected(client):
    resp = client.put("/api/admin/route-stops/order", json={"route_id": 1, "stops": []})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No stops to save"


def test_saving_bare_stop_ids_is_a_validation_error(client):
    resp = client.put("/api/admin/route-stops/order", json={"route_id": 1, "stops": [2, 1]})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
