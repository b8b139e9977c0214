from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Driver:
    """Domain entity: a driver on the roster."""

    driver_id: int
    full_name: str
    license_number: Optional[str] = None
    is_active: bool = True
