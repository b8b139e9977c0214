from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Optional, Sequence

from ..clock.service import ClockSessionController
from ..common.datetime_utils import now_local
from ..common.validators import clean_optional, require_enum, require_id
from ..core.constants import DEFAULT_INSPECTION_HISTORY_DAYS
from ..core.enums import InspectionType
from ..core.exceptions import ValidationError
from .model import Inspection, InspectionSubmission, NewInspection
from .repository import InspectionRepository

logger = logging.getLogger(__name__)


class InspectionService:
    """Stores inspections and drives the clock as a post-condition.

    The inspection write and the clock side effect are separate failure
    domains: once the inspection is stored, a clock failure is logged and
    reported on the result, never raised.
    """

    def __init__(
        self,
        inspections: InspectionRepository,
        clock: ClockSessionController,
        *,
        history_days: int = DEFAULT_INSPECTION_HISTORY_DAYS,
    ):
        self._inspections = inspections
        self._clock = clock
        self._history_days = int(history_days)

    def submit_inspection(
        self,
        *,
        driver_id: Any,
        vehicle_id: Any,
        inspection_type: Any,
        shift: Optional[str] = None,
        answers: Optional[dict] = None,
        overall_status: Optional[str] = None,
        notes: Optional[str] = None,
        signature_name: Optional[str] = None,
        odometer_reading: Any = None,
        driver_name: Optional[str] = None,
        vehicle_label: Optional[str] = None,
        now: datetime | None = None,
    ) -> InspectionSubmission:
        if not driver_id:
            raise ValidationError("Driver is required")
        if not vehicle_id:
            raise ValidationError("No vehicle selected")
        if not inspection_type:
            raise ValidationError("Inspection type is required")

        kind = require_enum(InspectionType, inspection_type, "inspection_type")
        now = now or now_local()

        new = NewInspection(
            driver_id=require_id(driver_id, "driver_id"),
            vehicle_id=require_id(vehicle_id, "vehicle_id"),
            inspection_type=kind,
            submitted_at=now,
            inspection_date=now.date(),
            driver_name=clean_optional(driver_name),
            vehicle_label=clean_optional(vehicle_label),
            shift=clean_optional(shift),
            answers=dict(answers or {}),
            overall_status=clean_optional(overall_status),
            notes=clean_optional(notes),
            signature_name=clean_optional(signature_name),
            odometer_reading=self._parse_odometer(odometer_reading),
        )

        inspection = self._inspections.create(new)
        logger.info(
            "[Inspection] Stored %s-trip inspection %s for driver %s",
            kind.value,
            inspection.inspection_id,
            inspection.driver_id,
        )

        try:
            result = self._clock.on_inspection_submitted(
                inspection.driver_id,
                kind,
                inspection.inspection_date,
                now,
            )
        except Exception as e:
            logger.warning(
                "[Inspection] Time tracking failed after inspection %s (driver %s): %s",
                inspection.inspection_id,
                inspection.driver_id,
                e,
                exc_info=True,
            )
            return InspectionSubmission(inspection=inspection, clock_error=str(e) or e.__class__.__name__)

        return InspectionSubmission(inspection=inspection, clock=result)

    def inspection_history(
        self,
        driver_id: Any,
        *,
        on_date: Optional[date] = None,
        inspection_type: Any = None,
        shift: Optional[str] = None,
        now: datetime | None = None,
    ) -> Sequence[Inspection]:
        driver_id = require_id(driver_id, "driver_id")
        kind = require_enum(InspectionType, inspection_type, "type") if inspection_type else None

        since = None
        if on_date is None:
            since = (now or now_local()) - timedelta(days=self._history_days)

        return self._inspections.list_for_driver(
            driver_id=driver_id,
            on_date=on_date,
            since=since,
            inspection_type=kind,
            shift=clean_optional(shift),
        )

    @staticmethod
    def _parse_odometer(value: Any) -> Optional[int]:
        if value is None or value == "":
            return None
        try:
            reading = int(value)
        except (TypeError, ValueError):
            raise ValidationError("Odometer reading must be a whole number")
        if reading < 0:
            raise ValidationError("Odometer reading must not be negative")
        return reading
