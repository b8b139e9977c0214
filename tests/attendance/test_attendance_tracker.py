from __future__ import annotations

import threading

import pytest

from src.driver_ops.driver_ops.attendance.model import GeoPoint
from src.driver_ops.driver_ops.attendance.service import AttendanceTracker
from src.driver_ops.driver_ops.attendance.strategies.strict_policy import StrictStatusPolicy
from src.driver_ops.driver_ops.core.enums import AttendanceStatus, StopType
from src.driver_ops.driver_ops.core.exceptions import NotFoundError, ValidationError
from src.driver_ops.driver_ops.routes.model import RouteStop


@pytest.fixture
def stops(stops_repo):
    stops_repo.add(
        RouteStop(stop_id=1, route_id=1, sequence=1, stop_type=StopType.PICKUP_HOME, student_id=10),
        RouteStop(stop_id=2, route_id=1, sequence=2, stop_type=StopType.DROPOFF_SCHOOL, student_id=10, school_id=500),
        RouteStop(stop_id=3, route_id=1, sequence=3, stop_type=StopType.OTHER),
    )
    return stops_repo


def _record(tracker, now, *, stop_id=1, status="picked_up", **kwargs):
    return tracker.record_attendance(
        student_id=10,
        route_id=1,
        route_stop_id=stop_id,
        driver_id=7,
        status=status,
        now=now,
        **kwargs,
    )


def test_second_submission_overwrites_first(stops, attendance_repo, fixed_now):
    tracker = AttendanceTracker(attendance_repo, stops)

    _record(tracker, fixed_now, status="picked_up")
    _record(tracker, fixed_now, status="absent")

    assert len(attendance_repo.rows) == 1
    (record,) = attendance_repo.rows.values()
    assert record.status == AttendanceStatus.ABSENT


def test_same_student_at_two_stops_is_tracked_separately(stops, attendance_repo, fixed_now):
    tracker = AttendanceTracker(attendance_repo, stops)

    _record(tracker, fixed_now, stop_id=1, status="picked_up")
    _record(tracker, fixed_now, stop_id=2, status="dropped_off")

    assert len(attendance_repo.rows) == 2


def test_lenient_policy_accepts_any_status_at_any_stop(stops, attendance_repo, fixed_now):
    tracker = AttendanceTracker(attendance_repo, stops)

    record = _record(tracker, fixed_now, stop_id=1, status="dropped_off")

    assert record.status == AttendanceStatus.DROPPED_OFF


def test_strict_policy_rejects_mismatched_status(stops, attendance_repo, fixed_now):
    tracker = AttendanceTracker(attendance_repo, stops, policy=StrictStatusPolicy())

    with pytest.raises(ValidationError):
        _record(tracker, fixed_now, stop_id=1, status="dropped_off")
    with pytest.raises(ValidationError):
        _record(tracker, fixed_now, stop_id=2, status="picked_up")
    assert attendance_repo.rows == {}

    _record(tracker, fixed_now, stop_id=1, status="no_show")
    _record(tracker, fixed_now, stop_id=3, status="picked_up")
    assert len(attendance_repo.rows) == 2


def test_unknown_status_is_rejected(stops, attendance_repo, fixed_now):
    with pytest.raises(ValidationError):
        _record(AttendanceTracker(attendance_repo, stops), fixed_now, status="late")


def test_unknown_stop_is_not_found(stops, attendance_repo, fixed_now):
    with pytest.raises(NotFoundError):
        _record(AttendanceTracker(attendance_repo, stops), fixed_now, stop_id=99)


def test_stop_on_another_route_is_rejected(stops, attendance_repo, fixed_now):
    stops.add(RouteStop(stop_id=20, route_id=2, sequence=1))

    with pytest.raises(ValidationError):
        _record(AttendanceTracker(attendance_repo, stops), fixed_now, stop_id=20)


def test_location_is_stored_when_given(stops, attendance_repo, fixed_now):
    record = _record(
        AttendanceTracker(attendance_repo, stops),
        fixed_now,
        location=GeoPoint(latitude=39.78, longitude=-89.65),
    )

    assert (record.latitude, record.longitude) == (39.78, -89.65)
    assert record.record_date == fixed_now.date()


def test_slow_location_provider_does_not_block(stops, attendance_repo, fixed_now):
    release = threading.Event()

    def slow_provider():
        release.wait(5)
        return GeoPoint(latitude=1.0, longitude=1.0)

    tracker = AttendanceTracker(attendance_repo, stops, geolocation_timeout=0.05)
    try:
        record = _record(tracker, fixed_now, location_provider=slow_provider)
    finally:
        release.set()

    assert record.latitude is None and record.longitude is None
    assert len(attendance_repo.rows) == 1


def test_denied_location_is_recorded_without_coordinates(stops, attendance_repo, fixed_now):
    def denied():
        raise PermissionError("location permission denied")

    record = _record(AttendanceTracker(attendance_repo, stops), fixed_now, location_provider=denied)

    assert record.latitude is None


def test_location_provider_result_is_used(stops, attendance_repo, fixed_now):
    record = _record(
        AttendanceTracker(attendance_repo, stops),
        fixed_now,
        location_provider=lambda: GeoPoint(latitude=39.0, longitude=-89.0),
    )

    assert record.latitude == 39.0


def test_sent_coordinates_win_over_provider(stops, attendance_repo, fixed_now):
    calls = []

    def provider():
        calls.append(1)
        return GeoPoint(latitude=1.0, longitude=1.0)

    record = _record(
        AttendanceTracker(attendance_repo, stops),
        fixed_now,
        location=GeoPoint(latitude=39.78, longitude=-89.65),
        location_provider=provider,
    )

    assert record.latitude == 39.78
    assert calls == []


@pytest.mark.parametrize(
    "lat, lng",
    [(None, None), ("", "-89.6"), ("abc", "1"), ("91", "0"), ("0", "-181")],
)
def test_geo_point_from_payload_ignores_bad_input(lat, lng):
    assert GeoPoint.from_payload(lat, lng) is None


def test_geo_point_from_payload_parses_strings():
    assert GeoPoint.from_payload("39.781", "-89.650") == GeoPoint(latitude=39.781, longitude=-89.65)
