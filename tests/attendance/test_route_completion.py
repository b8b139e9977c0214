from __future__ import annotations

from datetime import timedelta

import pytest

from src.driver_ops.driver_ops.attendance.completion import compute_completion_state
from src.driver_ops.driver_ops.attendance.service import AttendanceTracker, RouteCompletionService
from src.driver_ops.driver_ops.core.enums import StopType
from src.driver_ops.driver_ops.core.exceptions import GuardError, NotFoundError
from src.driver_ops.driver_ops.routes.itinerary import ItineraryBuilder
from src.driver_ops.driver_ops.routes.model import Route, RouteStop, StopView


@pytest.fixture
def route(routes_repo, stops_repo):
    # Students 10 and 11 share household 100, so stops 1 and 2 merge into one view.
    routes_repo.add(Route(route_id=1, name="North AM"))
    stops_repo.add(
        RouteStop(stop_id=1, route_id=1, sequence=1, stop_type=StopType.PICKUP_HOME, student_id=10),
        RouteStop(stop_id=2, route_id=1, sequence=2, stop_type=StopType.PICKUP_HOME, student_id=11),
        RouteStop(stop_id=3, route_id=1, sequence=3, stop_type=StopType.DROPOFF_SCHOOL, student_id=10, school_id=500),
    )
    return 1


@pytest.fixture
def completion(routes_repo, stops_repo, directory, attendance_repo, completions_repo):
    return RouteCompletionService(
        routes_repo,
        ItineraryBuilder(stops_repo, directory),
        attendance_repo,
        completions_repo,
    )


@pytest.fixture
def tracker(attendance_repo, stops_repo):
    return AttendanceTracker(attendance_repo, stops_repo)


def _confirm(tracker, now, student_id, stop_id, status="picked_up"):
    tracker.record_attendance(
        student_id=student_id,
        route_id=1,
        route_stop_id=stop_id,
        driver_id=7,
        status=status,
        now=now,
    )


def test_gate_opens_only_when_every_occurrence_is_recorded(route, completion, tracker, fixed_now):
    day = fixed_now.date()
    # Three occurrences: (10, 1), (11, 1) at the merged home stop and (10, 3) at school.
    _confirm(tracker, fixed_now, 10, 1)
    _confirm(tracker, fixed_now, 11, 1, status="absent")

    state = completion.get_route_completion_state(route, work_date=day)
    assert (state.total_students, state.confirmed_students) == (3, 2)
    assert not state.all_confirmed
    assert not state.can_complete

    _confirm(tracker, fixed_now, 10, 3, status="dropped_off")

    state = completion.get_route_completion_state(route, work_date=day)
    assert (state.total_students, state.confirmed_students) == (3, 3)
    assert state.can_complete


def test_route_without_students_is_always_completable(routes_repo, stops_repo, completion, fixed_now):
    routes_repo.add(Route(route_id=2, name="Shuttle"))
    stops_repo.add(RouteStop(stop_id=20, route_id=2, sequence=1, stop_type=StopType.OTHER, address="Depot"))

    state = completion.get_route_completion_state(2, work_date=fixed_now.date())

    assert state.total_students == 0
    assert not state.all_confirmed
    assert state.can_complete
    assert completion.can_complete(2, [], work_date=fixed_now.date())


def test_yesterdays_attendance_does_not_count(route, completion, tracker, fixed_now):
    yesterday = fixed_now - timedelta(days=1)
    for student_id, stop_id in ((10, 1), (11, 1), (10, 3)):
        _confirm(tracker, yesterday, student_id, stop_id)

    assert not completion.get_route_completion_state(route, work_date=fixed_now.date()).can_complete


def test_mark_complete_rechecks_gate(route, completion, tracker, completions_repo, fixed_now):
    _confirm(tracker, fixed_now, 10, 1)

    with pytest.raises(GuardError):
        completion.mark_route_complete(route, 7, now=fixed_now)
    assert completions_repo.rows == {}
    assert completions_repo.sections_entered == 1


def test_mark_complete_stores_once_per_driver_route_day(route, completion, tracker, completions_repo, fixed_now):
    for student_id, stop_id in ((10, 1), (11, 1), (10, 3)):
        _confirm(tracker, fixed_now, student_id, stop_id)

    first = completion.mark_route_complete(route, 7, now=fixed_now)
    completion.mark_route_complete(route, 7, now=fixed_now + timedelta(minutes=5))

    assert first.work_date == fixed_now.date()
    assert list(completions_repo.rows) == [(7, 1, fixed_now.date())]
    assert completions_repo.completed_route_ids(driver_id=7, work_date=fixed_now.date()) == [1]


def test_mark_complete_unknown_route(completion, fixed_now):
    with pytest.raises(NotFoundError):
        completion.mark_route_complete(99, 7, now=fixed_now)


def test_can_complete_uses_given_stops(route, completion, tracker, fixed_now):
    stops = [StopView(stop_id=3, route_id=1, sequence=3, stop_type=StopType.DROPOFF_SCHOOL, address="", student_ids=(10,))]
    assert not completion.can_complete(route, stops, work_date=fixed_now.date())

    _confirm(tracker, fixed_now, 10, 3, status="dropped_off")

    assert completion.can_complete(route, stops, work_date=fixed_now.date())


def test_compute_completion_state_counts_occurrences():
    views = [
        StopView(stop_id=1, route_id=1, sequence=1, stop_type=StopType.PICKUP_HOME, address="", student_ids=(10, 11)),
        StopView(stop_id=2, route_id=1, sequence=2, stop_type=StopType.DROPOFF_SCHOOL, address="", student_ids=(10,)),
    ]

    state = compute_completion_state(1, views, {(10, 1), (10, 2), (99, 9)})

    assert (state.total_students, state.confirmed_students) == (3, 2)
    assert state.pending == ((11, 1),)
