from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import now_local
from ..core.enums import ActionType, MarkStatus
from ..schedules.model import ClassRecord
from ..undo.audit import ActionAuditLogger
from .model import AttendanceStatusRow, IndexedDeleteResult, IndexedMarkResult
from .repository import AttendanceRepository
from .resolver import resolve_indices

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: bulk mark present / absent by schedule position.

    One store call per operation. Results come back in the order the indices
    were given, whatever order the store answers in.
    """

    def __init__(self, attendance: AttendanceRepository, audit: ActionAuditLogger, *, tz: ZoneInfo):
        self._attendance = attendance
        self._audit = audit
        self._tz = tz

    def mark_present_by_indices(
        self,
        user_id: str,
        classes: Sequence[ClassRecord],
        indices: Sequence[int],
        *,
        now: datetime | None = None,
    ) -> list[IndexedMarkResult]:
        selections = resolve_indices(classes, indices)
        if not selections:
            return []

        now = now or now_local(self._tz)
        rows = self._attendance.mark_bulk(
            user_id=user_id,
            class_ids=[cls.class_id for _, cls in selections],
            course_ids=[cls.course_id for _, cls in selections],
            class_times=[cls.start_time for _, cls in selections],
            checkin_time=now,
        )
        status_by_class = {r.class_id: r.status for r in rows}

        results = [
            IndexedMarkResult(
                index=index,
                class_id=cls.class_id,
                course_name=cls.course_name,
                status=status_by_class.get(cls.class_id, MarkStatus.FAILED),
            )
            for index, cls in selections
        ]

        marked = [r.class_id for r in results if r.status == MarkStatus.MARKED]
        self._audit.log_action(user_id, ActionType.ATTEND, marked)

        logger.info(
            "User %s marked present: %d new, %d already, %d failed",
            user_id,
            len(marked),
            sum(1 for r in results if r.status == MarkStatus.ALREADY),
            sum(1 for r in results if r.status == MarkStatus.FAILED),
        )
        return results

    def mark_present_all(self, user_id: str, classes: Sequence[ClassRecord], *, now: datetime | None = None):
        return self.mark_present_by_indices(user_id, classes, range(1, len(classes) + 1), now=now)

    def mark_absent_by_indices(
        self,
        user_id: str,
        classes: Sequence[ClassRecord],
        indices: Sequence[int],
    ) -> list[IndexedDeleteResult]:
        selections = resolve_indices(classes, indices)
        if not selections:
            return []

        class_ids = [cls.class_id for _, cls in selections]
        rows = self._attendance.delete_bulk(user_id=user_id, class_ids=class_ids)
        deleted_by_class = {r.class_id: r.deleted for r in rows}

        # Absence is logged for every attempted id, deleted or not.
        self._audit.log_action(user_id, ActionType.ABSENT, class_ids)

        return [
            IndexedDeleteResult(
                index=index,
                class_id=cls.class_id,
                course_name=cls.course_name,
                deleted=deleted_by_class.get(cls.class_id, False),
            )
            for index, cls in selections
        ]

    def mark_absent_all(self, user_id: str, classes: Sequence[ClassRecord]):
        return self.mark_absent_by_indices(user_id, classes, range(1, len(classes) + 1))

    def get_status_bulk(self, user_id: str, class_ids: Sequence[str]) -> list[AttendanceStatusRow]:
        if not class_ids:
            return []
        rows = self._attendance.status_bulk(user_id=user_id, class_ids=class_ids)
        marked = {r.class_id: r.is_marked for r in rows}
        return [AttendanceStatusRow(class_id=cid, is_marked=marked.get(cid, False)) for cid in class_ids]
