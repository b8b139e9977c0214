from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import AttendanceStatus, StopType


class StatusPolicy(ABC):
    """Strategy Pattern: decide whether a status may be recorded at a stop type."""

    @abstractmethod
    def check(self, *, status: AttendanceStatus, stop_type: StopType) -> None:
        """Raise ValidationError when the pairing is not allowed."""

        raise NotImplementedError
