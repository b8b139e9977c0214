from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Iterable

from ..routes.model import StopView


@dataclass(frozen=True)
class RouteCompletionState:
    """Derived, never stored: how many student-occurrences have a recorded status."""

    route_id: int
    total_students: int
    confirmed_students: int
    pending: tuple[tuple[int, int], ...] = ()

    @property
    def all_confirmed(self) -> bool:
        return self.total_students > 0 and self.confirmed_students == self.total_students

    @property
    def can_complete(self) -> bool:
        """A route with no students at all is always completable."""
        return self.total_students == 0 or self.all_confirmed


def student_occurrences(stops: Iterable[StopView]) -> list[tuple[int, int]]:
    """(student_id, stop_id) pairs; a student at two stops counts twice."""
    seen: dict[tuple[int, int], None] = {}
    for stop in stops:
        for student_id in stop.student_ids:
            seen.setdefault((student_id, stop.stop_id), None)
    return list(seen)


def compute_completion_state(
    route_id: int,
    stops: Iterable[StopView],
    recorded: Collection[tuple[int, int]],
) -> RouteCompletionState:
    occurrences = student_occurrences(stops)
    pending = tuple(key for key in occurrences if key not in recorded)
    return RouteCompletionState(
        route_id=route_id,
        total_students=len(occurrences),
        confirmed_students=len(occurrences) - len(pending),
        pending=pending,
    )
