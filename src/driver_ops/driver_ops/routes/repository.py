from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Route, RouteStop, StopDraft


class RouteRepository(Protocol):
    def get_route(self, route_id: int) -> Optional[Route]:
        raise NotImplementedError

    def routes_by_ids(self, route_ids: Iterable[int]) -> Sequence[Route]:
        raise NotImplementedError

    def assigned_route_ids(self, *, driver_id: int, day_of_week: int) -> Sequence[int]:
        """Routes assigned to a driver on a weekday (0=Sunday .. 6=Saturday)."""

        raise NotImplementedError


class RouteStopRepository(Protocol):
    def get(self, stop_id: int) -> Optional[RouteStop]:
        raise NotImplementedError

    def list_for_route(self, route_id: int) -> Sequence[RouteStop]:
        """Ordered by sequence."""

        raise NotImplementedError

    def list_for_routes(self, route_ids: Iterable[int]) -> Sequence[RouteStop]:
        raise NotImplementedError

    def insert(self, *, route_id: int, sequence: int, draft: StopDraft) -> RouteStop:
        raise NotImplementedError

    def delete(self, stop_id: int) -> bool:
        raise NotImplementedError

    def save_order(self, *, route_id: int, stops: Sequence[RouteStop]) -> None:
        """Persist sequence and details of every stop in one transaction.

        All-or-nothing: raises NotFoundError (and writes nothing) if any
        stop is not on the route.
        """

        raise NotImplementedError
