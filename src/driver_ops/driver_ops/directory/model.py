from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    student_id: int
    full_name: str
    household_id: Optional[int] = None
    school_id: Optional[int] = None
    pickup_address: Optional[str] = None
    pickup_city: Optional[str] = None
    pickup_state: Optional[str] = None
    pickup_zip: Optional[str] = None
    primary_guardian_name: Optional[str] = None
    primary_guardian_phone: Optional[str] = None

    def home_address(self) -> str:
        """'street, city, STATE ZIP' from whichever parts are filled in."""

        parts: list[str] = []
        if self.pickup_address and self.pickup_address.strip():
            parts.append(self.pickup_address.strip())
        if self.pickup_city and self.pickup_city.strip():
            parts.append(self.pickup_city.strip())

        state_zip = [p.strip() for p in (self.pickup_state, self.pickup_zip) if p and p.strip()]
        if state_zip:
            parts.append(" ".join(state_zip))

        return ", ".join(parts)


@dataclass(frozen=True)
class School:
    school_id: int
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
