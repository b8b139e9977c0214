from __future__ import annotations

from enum import Enum


class InspectionType(str, Enum):
    """Vehicle inspection kind; pre-trip clocks in, post-trip clocks out."""

    PRE = "pre"
    POST = "post"


class ClockState(str, Enum):
    """Per driver/work-day clock state, inferred from open intervals."""

    CLOCKED_OUT = "clocked_out"
    CLOCKED_IN = "clocked_in"


class ClockOutcome(str, Enum):
    OPENED = "opened"
    ALREADY_OPEN = "already_open"
    CLOSED = "closed"
    NOTHING_OPEN = "nothing_open"


class StopType(str, Enum):
    PICKUP_HOME = "pickup_home"
    DROPOFF_HOME = "dropoff_home"
    PICKUP_SCHOOL = "pickup_school"
    DROPOFF_SCHOOL = "dropoff_school"
    OTHER = "other"

    @property
    def is_pickup(self) -> bool:
        return self in (StopType.PICKUP_HOME, StopType.PICKUP_SCHOOL)

    @property
    def is_dropoff(self) -> bool:
        return self in (StopType.DROPOFF_HOME, StopType.DROPOFF_SCHOOL)

    @property
    def is_school(self) -> bool:
        return self in (StopType.PICKUP_SCHOOL, StopType.DROPOFF_SCHOOL)

    @property
    def is_home(self) -> bool:
        return self in (StopType.PICKUP_HOME, StopType.DROPOFF_HOME)

    @property
    def needs_student(self) -> bool:
        return self is not StopType.OTHER


class AttendanceStatus(str, Enum):
    """Per (student, stop) attendance status recorded by the driver."""

    PICKED_UP = "picked_up"
    DROPPED_OFF = "dropped_off"
    ABSENT = "absent"
    NO_SHOW = "no_show"
    CANCELLED = "cancelled"


class MoveDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class RouteDirection(str, Enum):
    AM = "AM"
    MIDDAY = "MIDDAY"
    PM = "PM"


class Weekday(str, Enum):
    """First day of a displayed timecard week."""

    SUNDAY = "sunday"
    MONDAY = "monday"


class ClockEvent(str, Enum):
    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
