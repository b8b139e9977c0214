from __future__ import annotations

from ...core.enums import AttendanceStatus, StopType
from ...core.exceptions import ValidationError
from .base import StatusPolicy

_NOT_RIDING = {AttendanceStatus.ABSENT, AttendanceStatus.NO_SHOW, AttendanceStatus.CANCELLED}

PICKUP_STATUSES = frozenset(_NOT_RIDING | {AttendanceStatus.PICKED_UP})
DROPOFF_STATUSES = frozenset(_NOT_RIDING | {AttendanceStatus.DROPPED_OFF})


class StrictStatusPolicy(StatusPolicy):
    """picked_up only at pickup stops, dropped_off only at drop-off stops."""

    def check(self, *, status: AttendanceStatus, stop_type: StopType) -> None:
        if stop_type.is_pickup and status not in PICKUP_STATUSES:
            raise ValidationError(f"Status '{status.value}' is not allowed at a pickup stop")
        if stop_type.is_dropoff and status not in DROPOFF_STATUSES:
            raise ValidationError(f"Status '{status.value}' is not allowed at a drop-off stop")
