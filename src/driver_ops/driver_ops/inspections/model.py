from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..clock.model import ClockResult
from ..core.enums import InspectionType


@dataclass(frozen=True)
class Inspection:
    """Domain entity: a submitted pre-trip or post-trip vehicle inspection."""

    inspection_id: int
    driver_id: int
    vehicle_id: int
    inspection_type: InspectionType
    submitted_at: datetime
    inspection_date: date
    driver_name: Optional[str] = None
    vehicle_label: Optional[str] = None
    shift: Optional[str] = None
    answers: dict[str, Any] = field(default_factory=dict)
    overall_status: Optional[str] = None
    notes: Optional[str] = None
    signature_name: Optional[str] = None
    odometer_reading: Optional[int] = None


@dataclass(frozen=True)
class NewInspection:
    driver_id: int
    vehicle_id: int
    inspection_type: InspectionType
    submitted_at: datetime
    inspection_date: date
    driver_name: Optional[str] = None
    vehicle_label: Optional[str] = None
    shift: Optional[str] = None
    answers: dict[str, Any] = field(default_factory=dict)
    overall_status: Optional[str] = None
    notes: Optional[str] = None
    signature_name: Optional[str] = None
    odometer_reading: Optional[int] = None


@dataclass(frozen=True)
class InspectionSubmission:
    """Result of a submission: the stored inspection plus what the clock did.

    clock_error is set when the time-tracking side effect failed; the
    inspection itself is still stored.
    """

    inspection: Inspection
    clock: Optional[ClockResult] = None
    clock_error: Optional[str] = None
