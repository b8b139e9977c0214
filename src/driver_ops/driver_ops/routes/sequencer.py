from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from ..core.enums import MoveDirection
from ..core.exceptions import NotFoundError
from .model import RouteStop


class StopSequence:
    """In-memory ordered list of a route's stops.

    The list order is the truth: moves only touch the order,
    and `renumbered()` assigns 1..N from it at save time. Stored sequence
    values are only used once, to build the initial order.
    """

    def __init__(self, stops: Iterable[RouteStop] = ()):
        self._stops: list[RouteStop] = list(stops)

    @classmethod
    def from_stored(cls, stops: Iterable[RouteStop]) -> "StopSequence":
        return cls(sorted(stops, key=lambda s: (s.sequence, s.stop_id)))

    def stops(self) -> list[RouteStop]:
        return list(self._stops)

    def ids(self) -> list[int]:
        return [s.stop_id for s in self._stops]

    def next_sequence(self) -> int:
        return len(self._stops) + 1

    def move(self, stop_id: int, direction: MoveDirection) -> bool:
        """Swap a stop with its neighbor. Returns False at either boundary."""
        idx = self._index_of(stop_id)
        target = idx - 1 if direction == MoveDirection.UP else idx + 1
        if target < 0 or target >= len(self._stops):
            return False
        self._stops[idx], self._stops[target] = self._stops[target], self._stops[idx]
        return True

    def arrange(self, ordered_ids: Iterable[int]) -> None:
        """Adopt a client-side order; stops not listed keep their relative order at the end."""
        by_id = {s.stop_id: s for s in self._stops}
        ordered: list[RouteStop] = []
        for stop_id in ordered_ids:
            stop = by_id.pop(int(stop_id), None)
            if stop is None:
                raise NotFoundError(f"Stop {stop_id} is not on this route")
            ordered.append(stop)
        ordered.extend(s for s in self._stops if s.stop_id in by_id)
        self._stops = ordered

    def renumbered(self) -> list[RouteStop]:
        return [replace(stop, sequence=index) for index, stop in enumerate(self._stops, start=1)]

    def _index_of(self, stop_id: int) -> int:
        for idx, stop in enumerate(self._stops):
            if stop.stop_id == stop_id:
                return idx
        raise NotFoundError(f"Stop {stop_id} is not on this route")
