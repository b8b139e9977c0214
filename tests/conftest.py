from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

import pytest

from src.driver_ops.driver_ops.attendance.model import AttendanceRecord, RouteCompletion
from src.driver_ops.driver_ops.clock.model import TimeInterval
from src.driver_ops.driver_ops.core.exceptions import NotFoundError
from src.driver_ops.driver_ops.directory.model import School, Student
from src.driver_ops.driver_ops.drivers.model import Driver
from src.driver_ops.driver_ops.inspections.model import Inspection, NewInspection
from src.driver_ops.driver_ops.routes.model import Route, RouteStop, StopDraft


class InMemoryIntervals:
    """Enforces one open interval per driver/day, like the unique key in MySQL."""

    def __init__(self, intervals: Iterable[TimeInterval] = ()):
        self.rows: dict[int, TimeInterval] = {i.interval_id: i for i in intervals}

    def find_open(self, *, driver_id: int, work_date: date) -> Optional[TimeInterval]:
        for row in sorted(self.rows.values(), key=lambda r: r.start_time, reverse=True):
            if row.driver_id == driver_id and row.work_date == work_date and row.is_open:
                return row
        return None

    def insert_open(self, *, driver_id: int, work_date: date, start_time: datetime) -> Optional[TimeInterval]:
        if self.find_open(driver_id=driver_id, work_date=work_date) is not None:
            return None
        interval = TimeInterval(
            interval_id=max(self.rows, default=0) + 1,
            driver_id=driver_id,
            work_date=work_date,
            start_time=start_time,
        )
        self.rows[interval.interval_id] = interval
        return interval

    def close(self, *, interval_id: int, end_time: datetime, duration_seconds: int) -> bool:
        row = self.rows.get(interval_id)
        if row is None or not row.is_open:
            return False
        self.rows[interval_id] = replace(row, end_time=end_time, duration_seconds=duration_seconds)
        return True

    def list_range(self, *, start: date, end: date, driver_ids: Optional[Iterable[int]] = None):
        ids = None if driver_ids is None else {int(i) for i in driver_ids}
        rows = [
            r
            for r in self.rows.values()
            if start <= r.work_date <= end and (ids is None or r.driver_id in ids)
        ]
        rows.sort(key=lambda r: r.start_time)
        rows.sort(key=lambda r: r.work_date, reverse=True)
        return rows

    def list_open_for_date(self, *, work_date: date):
        return [r for r in self.rows.values() if r.work_date == work_date and r.is_open]

    def open_count(self, driver_id: int, work_date: date) -> int:
        return sum(1 for r in self.rows.values() if r.driver_id == driver_id and r.work_date == work_date and r.is_open)


class InMemoryDrivers:
    def __init__(self, drivers: Iterable[Driver] = ()):
        self.drivers = {d.driver_id: d for d in drivers}

    def list_active(self):
        return sorted((d for d in self.drivers.values() if d.is_active), key=lambda d: d.full_name)

    def list_by_ids(self, driver_ids: Iterable[int]):
        return [self.drivers[i] for i in driver_ids if i in self.drivers]


class InMemoryDirectory:
    def __init__(self, students: Iterable[Student] = (), schools: Iterable[School] = ()):
        self.students = {s.student_id: s for s in students}
        self.schools = {s.school_id: s for s in schools}

    def get_student(self, student_id: int) -> Optional[Student]:
        return self.students.get(student_id)

    def students_by_ids(self, student_ids: Iterable[int]):
        return {i: self.students[i] for i in student_ids if i in self.students}

    def schools_by_ids(self, school_ids: Iterable[int]):
        return {i: self.schools[i] for i in school_ids if i in self.schools}


class InMemoryInspections:
    def __init__(self):
        self.rows: list[Inspection] = []

    def create(self, new: NewInspection) -> Inspection:
        inspection = Inspection(inspection_id=len(self.rows) + 1, **vars(new))
        self.rows.append(inspection)
        return inspection

    def list_for_driver(self, *, driver_id, on_date=None, since=None, inspection_type=None, shift=None):
        rows = [r for r in self.rows if r.driver_id == driver_id]
        if on_date is not None:
            rows = [r for r in rows if r.inspection_date == on_date]
        if since is not None:
            rows = [r for r in rows if r.submitted_at >= since]
        if inspection_type is not None:
            rows = [r for r in rows if r.inspection_type == inspection_type]
        if shift is not None:
            rows = [r for r in rows if r.shift == shift]
        return sorted(rows, key=lambda r: r.submitted_at, reverse=True)


class InMemoryRoutes:
    def __init__(self, routes: Iterable[Route] = (), assignments: Iterable[tuple[int, int, int]] = ()):
        self.routes = {r.route_id: r for r in routes}
        # (driver_id, route_id, day_of_week)
        self.assignments = list(assignments)

    def add(self, route: Route, *, driver_id: Optional[int] = None, days: Iterable[int] = ()) -> None:
        self.routes[route.route_id] = route
        for day in days:
            self.assignments.append((driver_id, route.route_id, day))

    def get_route(self, route_id: int) -> Optional[Route]:
        return self.routes.get(route_id)

    def routes_by_ids(self, route_ids: Iterable[int]):
        return sorted((self.routes[i] for i in set(route_ids) if i in self.routes), key=lambda r: r.name)

    def assigned_route_ids(self, *, driver_id: int, day_of_week: int):
        return [r for d, r, dow in self.assignments if d == driver_id and dow == day_of_week]


class InMemoryStops:
    def __init__(self, stops: Iterable[RouteStop] = ()):
        self.rows: dict[int, RouteStop] = {s.stop_id: s for s in stops}
        self._next_id = max(self.rows, default=0) + 1
        self.save_calls = 0

    def add(self, *stops: RouteStop) -> None:
        for stop in stops:
            self.rows[stop.stop_id] = stop
            self._next_id = max(self._next_id, stop.stop_id + 1)

    def get(self, stop_id: int) -> Optional[RouteStop]:
        return self.rows.get(stop_id)

    def list_for_route(self, route_id: int):
        return self.list_for_routes([route_id])

    def list_for_routes(self, route_ids: Iterable[int]):
        ids = set(route_ids)
        return sorted((s for s in self.rows.values() if s.route_id in ids), key=lambda s: (s.route_id, s.sequence, s.stop_id))

    def insert(self, *, route_id: int, sequence: int, draft: StopDraft) -> RouteStop:
        stop = RouteStop(stop_id=self._next_id, route_id=route_id, sequence=sequence, **vars(draft))
        self.rows[stop.stop_id] = stop
        self._next_id += 1
        return stop

    def delete(self, stop_id: int) -> bool:
        return self.rows.pop(stop_id, None) is not None

    def save_order(self, *, route_id: int, stops):
        self.save_calls += 1
        missing = [s.stop_id for s in stops if s.stop_id not in self.rows or self.rows[s.stop_id].route_id != route_id]
        if missing:
            raise NotFoundError(f"Stops not on route {route_id}")
        for stop in stops:
            self.rows[stop.stop_id] = stop


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[tuple[int, int, date], AttendanceRecord] = {}

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        self.rows[(record.student_id, record.route_stop_id, record.record_date)] = record
        return record

    def list_for_route(self, *, route_id: int, record_date: date):
        return [r for r in self.rows.values() if r.route_id == route_id and r.record_date == record_date]

    def list_for_driver(self, *, driver_id: int, record_date: date):
        return [r for r in self.rows.values() if r.driver_id == driver_id and r.record_date == record_date]


class InMemoryCompletions:
    def __init__(self):
        self.rows: dict[tuple[int, int, date], RouteCompletion] = {}
        self.sections_entered = 0

    @contextmanager
    def critical_section(self, *, route_id: int, work_date: date):
        self.sections_entered += 1
        yield

    def upsert(self, *, driver_id: int, route_id: int, work_date: date, completed_at: datetime) -> RouteCompletion:
        completion = RouteCompletion(driver_id=driver_id, route_id=route_id, work_date=work_date, completed_at=completed_at)
        self.rows[(driver_id, route_id, work_date)] = completion
        return completion

    def completed_route_ids(self, *, driver_id: int, work_date: date):
        return [r for d, r, day in self.rows if d == driver_id and day == work_date]


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def intervals() -> InMemoryIntervals:
    return InMemoryIntervals()


@pytest.fixture
def roster() -> InMemoryDrivers:
    return InMemoryDrivers(
        [
            Driver(driver_id=1, full_name="Dana Reyes", license_number="CDL-1001"),
            Driver(driver_id=2, full_name="Abel Ortiz", license_number="CDL-1002"),
            Driver(driver_id=3, full_name="Inez Park", license_number="CDL-1003", is_active=False),
        ]
    )


@pytest.fixture
def directory() -> InMemoryDirectory:
    return InMemoryDirectory(
        students=[
            Student(
                student_id=10,
                full_name="Mia Chen",
                household_id=100,
                school_id=500,
                pickup_address="12 Elm St",
                pickup_city="Springfield",
                pickup_state="IL",
                pickup_zip="62701",
                primary_guardian_name="Lin Chen",
                primary_guardian_phone="555-0101",
            ),
            Student(
                student_id=11,
                full_name="Leo Chen",
                household_id=100,
                school_id=500,
                pickup_address="12 Elm St",
                pickup_city="Springfield",
                pickup_state="IL",
                pickup_zip="62701",
            ),
            Student(
                student_id=12,
                full_name="Ava Brooks",
                household_id=101,
                school_id=500,
                pickup_address="9 Oak Ave",
                pickup_city="Springfield",
                pickup_state="IL",
                pickup_zip="62702",
            ),
        ],
        schools=[School(school_id=500, name="Lincoln Elementary", address="400 School Rd, Springfield, IL", phone="555-0500")],
    )


@pytest.fixture
def inspections_repo() -> InMemoryInspections:
    return InMemoryInspections()


@pytest.fixture
def routes_repo() -> InMemoryRoutes:
    return InMemoryRoutes()


@pytest.fixture
def stops_repo() -> InMemoryStops:
    return InMemoryStops()


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def completions_repo() -> InMemoryCompletions:
    return InMemoryCompletions()
