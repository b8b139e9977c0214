from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from ..directory.model import School, Student
from ..directory.repository import DirectoryRepository
from .addresses import effective_address, school_for_stop
from .model import RouteStop, StopView
from .repository import RouteStopRepository


def _unique_students(group: Sequence[RouteStop], students: Mapping[int, Student]) -> tuple[tuple[int, ...], tuple[str, ...]]:
    ids: list[int] = []
    names: list[str] = []
    for stop in group:
        if stop.student_id is None or stop.student_id in ids:
            continue
        ids.append(stop.student_id)
        student = students.get(stop.student_id)
        if student is not None:
            names.append(student.full_name)
    return tuple(ids), tuple(names)


def build_stop_views(
    stops: Iterable[RouteStop],
    students: Mapping[int, Student],
    schools: Mapping[int, School],
) -> list[StopView]:
    """Group one route's stops the way the driver works them.

    - school stops: one view per (school, stop type)
    - home stops: one view per household
    - anything else: one view per stop

    A group takes the id, sequence and planned time of its first stop.
    """

    ordered = sorted(stops, key=lambda s: (s.sequence, s.stop_id))

    singles: list[StopView] = []
    school_groups: dict[tuple[int, str], list[RouteStop]] = {}
    household_groups: dict[int, list[RouteStop]] = {}

    for stop in ordered:
        student = students.get(stop.student_id) if stop.student_id is not None else None
        household_id = (student.household_id if student else None) or stop.household_id

        if stop.stop_type.is_school and stop.school_id is not None:
            school_groups.setdefault((stop.school_id, stop.stop_type.value), []).append(stop)
        elif household_id is not None:
            household_groups.setdefault(household_id, []).append(stop)
        else:
            school_id = school_for_stop(stop, student) if stop.stop_type.is_school else stop.school_id
            school = schools.get(school_id) if school_id is not None else None
            singles.append(
                StopView(
                    stop_id=stop.stop_id,
                    route_id=stop.route_id,
                    sequence=stop.sequence,
                    stop_type=stop.stop_type,
                    address=effective_address(stop, student, school),
                    planned_time=stop.planned_time,
                    student_ids=(stop.student_id,) if stop.student_id is not None else (),
                    student_names=(student.full_name,) if student else (),
                    school_name=school.name if school else None,
                    school_phone=school.phone if school else None,
                    guardian_name=student.primary_guardian_name if student else None,
                    guardian_phone=student.primary_guardian_phone if student else None,
                )
            )

    views = list(singles)

    for (school_id, _), group in school_groups.items():
        first = group[0]
        school = schools.get(school_id)
        ids, names = _unique_students(group, students)
        views.append(
            StopView(
                stop_id=first.stop_id,
                route_id=first.route_id,
                sequence=first.sequence,
                stop_type=first.stop_type,
                address=effective_address(first, None, school),
                planned_time=first.planned_time,
                student_ids=ids,
                student_names=names,
                school_name=school.name if school else None,
                school_phone=school.phone if school else None,
            )
        )

    for household_id, group in household_groups.items():
        first = group[0]
        first_student = students.get(first.student_id) if first.student_id is not None else None
        ids, names = _unique_students(group, students)
        views.append(
            StopView(
                stop_id=first.stop_id,
                route_id=first.route_id,
                sequence=first.sequence,
                stop_type=first.stop_type,
                address=effective_address(first, first_student, None),
                planned_time=first.planned_time,
                student_ids=ids,
                student_names=names,
                household_id=household_id,
                guardian_name=first_student.primary_guardian_name if first_student else None,
                guardian_phone=first_student.primary_guardian_phone if first_student else None,
            )
        )

    views.sort(key=lambda v: (v.sequence, v.stop_id))
    return views


class ItineraryBuilder:
    """Loads stops plus the students/schools they reference and builds stop views."""

    def __init__(self, stops: RouteStopRepository, directory: DirectoryRepository):
        self._stops = stops
        self._directory = directory

    def for_route(self, route_id: int) -> list[StopView]:
        return self.for_routes([route_id]).get(route_id, [])

    def for_routes(self, route_ids: Iterable[int]) -> dict[int, list[StopView]]:
        ids = list(dict.fromkeys(int(r) for r in route_ids))
        if not ids:
            return {}

        stops = list(self._stops.list_for_routes(ids))
        students = self._directory.students_by_ids({s.student_id for s in stops if s.student_id is not None})

        school_ids: set[int] = {s.school_id for s in stops if s.school_id is not None}
        school_ids.update(st.school_id for st in students.values() if st.school_id is not None)
        schools = self._directory.schools_by_ids(school_ids)

        by_route: dict[int, list[RouteStop]] = {r: [] for r in ids}
        for stop in stops:
            by_route.setdefault(stop.route_id, []).append(stop)

        return {r: build_stop_views(by_route[r], students, schools) for r in ids}
