from __future__ import annotations

from typing import Optional

from ..directory.model import School, Student
from .model import RouteStop


def derived_address(stop: RouteStop, student: Optional[Student], school: Optional[School]) -> str:
    """Address implied by the stop's student (home stops) or school (school stops)."""

    if stop.stop_type.is_home and student is not None:
        return student.home_address()
    if stop.stop_type.is_school and school is not None and school.address:
        return school.address.strip()
    return ""


def effective_address(stop: RouteStop, student: Optional[Student], school: Optional[School]) -> str:
    """Address to display for a stop.

    An address stored on the stop is an admin override and always wins;
    derivation only fills in blanks and is never written back.
    """

    if stop.address and stop.address.strip():
        return stop.address.strip()
    return derived_address(stop, student, school)


def school_for_stop(stop: RouteStop, student: Optional[Student]) -> Optional[int]:
    """School linked to a stop, falling back to the student's school."""
    if stop.school_id is not None:
        return stop.school_id
    return student.school_id if student is not None else None
