from __future__ import annotations

from ...core.enums import AttendanceStatus, StopType
from .base import StatusPolicy


class LenientStatusPolicy(StatusPolicy):
    """Any of the five statuses at any stop; the driver app narrows the choices."""

    def check(self, *, status: AttendanceStatus, stop_type: StopType) -> None:
        return None
