from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ..schedules.model import ClassRecord
from .model import AttendanceStatusRow, DeleteResult, MarkResult


class AttendanceRepository(Protocol):
    """Attendance store contract.

    Every bulk method is one transaction and returns one row per input id,
    in input order.
    """

    def mark_bulk(
        self,
        *,
        user_id: str,
        class_ids: Sequence[str],
        course_ids: Sequence[str],
        class_times: Sequence[datetime],
        checkin_time: datetime,
    ) -> Sequence[MarkResult]:
        """Conflict-aware insert per (user, class): marked / already / failed."""

        raise NotImplementedError

    def delete_bulk(self, *, user_id: str, class_ids: Sequence[str]) -> Sequence[DeleteResult]:
        raise NotImplementedError

    def status_bulk(self, *, user_id: str, class_ids: Sequence[str]) -> Sequence[AttendanceStatusRow]:
        raise NotImplementedError

    def restore_bulk(self, *, user_id: str, classes: Sequence[ClassRecord], checkin_time: datetime) -> int:
        """Re-create present rows after an undone absence.

        All or nothing. Rows that already exist are left alone, so a retried
        restore is a no-op for them. Returns the number of rows actually
        inserted.
        """

        raise NotImplementedError
