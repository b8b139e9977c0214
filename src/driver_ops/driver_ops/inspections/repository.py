from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import InspectionType
from .model import Inspection, NewInspection


class InspectionRepository(Protocol):
    def create(self, new: NewInspection) -> Inspection:
        raise NotImplementedError

    def list_for_driver(
        self,
        *,
        driver_id: int,
        on_date: Optional[date] = None,
        since: Optional[datetime] = None,
        inspection_type: Optional[InspectionType] = None,
        shift: Optional[str] = None,
    ) -> Sequence[Inspection]:
        """Newest first."""

        raise NotImplementedError
