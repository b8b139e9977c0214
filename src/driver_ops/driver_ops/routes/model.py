from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Optional

from ..core.enums import RouteDirection, StopType


@dataclass(frozen=True)
class Route:
    route_id: int
    name: str
    direction: RouteDirection = RouteDirection.AM
    is_active: bool = True


@dataclass(frozen=True)
class RouteStop:
    """Domain entity: one scheduled point on a route.

    `sequence` is dense (1..N) after a save; between saves, removals may
    leave gaps. `address` is what an admin stored and is never rewritten
    by address derivation.
    """

    stop_id: int
    route_id: int
    sequence: int
    stop_type: StopType = StopType.OTHER
    student_id: Optional[int] = None
    school_id: Optional[int] = None
    household_id: Optional[int] = None
    address: Optional[str] = None
    planned_time: Optional[time] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class StopDraft:
    """Input for a new stop, before it has an id or a sequence."""

    stop_type: StopType
    student_id: Optional[int] = None
    school_id: Optional[int] = None
    household_id: Optional[int] = None
    address: Optional[str] = None
    planned_time: Optional[time] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class StopView:
    """Read-model for the driver: a stop with the students handled there.

    Home stops of one household and school stops of one school/stop type
    are merged into a single view; `student_ids` holds one entry per
    student-occurrence at this view.
    """

    stop_id: int
    route_id: int
    sequence: int
    stop_type: StopType
    address: str
    planned_time: Optional[time] = None
    student_ids: tuple[int, ...] = ()
    student_names: tuple[str, ...] = ()
    household_id: Optional[int] = None
    school_name: Optional[str] = None
    school_phone: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None


@dataclass(frozen=True)
class DriverRoute:
    route: Route
    stops: list[StopView] = field(default_factory=list)


@dataclass(frozen=True)
class DriverDay:
    """Everything the driver screen needs for today."""

    routes: list[DriverRoute]
    attendance: dict[tuple[int, int], str]
    total_route_counts: dict[str, int]
