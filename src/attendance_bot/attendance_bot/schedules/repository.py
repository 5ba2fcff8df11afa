from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ClassRecord, Enrollment


class ScheduleRepository(Protocol):
    def get_enrollment(self, user_id: str) -> Optional[Enrollment]:
        raise NotImplementedError

    def list_for_date(self, *, batch_id: str, course_ids: Sequence[str], class_date: date) -> Sequence[ClassRecord]:
        """Classes of one batch on one date, ordered by start time."""

        raise NotImplementedError

    def get_by_ids(self, class_ids: Sequence[str]) -> Sequence[ClassRecord]:
        """Timetable rows that still exist for the given ids (missing ids are skipped)."""

        raise NotImplementedError
