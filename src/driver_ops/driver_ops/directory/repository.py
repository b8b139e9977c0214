from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol

from .model import School, Student


class DirectoryRepository(Protocol):
    """Batch lookups of students and schools used to enrich route stops."""

    def get_student(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def students_by_ids(self, student_ids: Iterable[int]) -> Mapping[int, Student]:
        raise NotImplementedError

    def schools_by_ids(self, school_ids: Iterable[int]) -> Mapping[int, School]:
        raise NotImplementedError
