from __future__ import annotations

import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import local_date_of, now_local
from ..core.constants import GENERIC_FAILURE_MESSAGE
from ..core.enums import ActionType, UndoOutcome
from ..core.exceptions import StoreError
from ..schedules.repository import ScheduleRepository
from .model import AttendanceAction, UndoResult
from .repository import ActionLogRepository

logger = logging.getLogger(__name__)


def _plural(count: int) -> str:
    return "class" if count == 1 else "classes"


class UndoService:
    """Single-step, same-day undo over the action log.

    Rules:
    - only the most recent entry for the user is considered
    - only entries created today (operating timezone) are reverted
    - an entry is consumed only after its reversal succeeded
    - undoing an absence restores classes that are still on the timetable, nothing else
    """

    def __init__(
        self,
        actions: ActionLogRepository,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        *,
        tz: ZoneInfo,
    ):
        self._actions = actions
        self._attendance = attendance
        self._schedules = schedules
        self._tz = tz

    def undo_last(self, user_id: str, *, now: datetime | None = None) -> UndoResult:
        now = now or now_local(self._tz)

        try:
            action = self._actions.get_latest(user_id)
        except StoreError:
            logger.exception("Undo: could not read action log for user %s", user_id)
            return UndoResult(UndoOutcome.STORE_ERROR, GENERIC_FAILURE_MESSAGE)

        if action is None:
            return UndoResult(UndoOutcome.NOTHING_TO_UNDO, "Nothing to undo.")

        action_date = local_date_of(action.created_at, self._tz)
        if action_date != local_date_of(now, self._tz):
            return UndoResult(
                UndoOutcome.STALE,
                f"Can only undo today's actions. Last action was on {action_date.isoformat()}.",
            )

        try:
            if action.action_type == ActionType.ATTEND:
                count = self._revert_attend(action)
            else:
                count = self._revert_absent(action, now=now)
                if count is None:
                    return UndoResult(
                        UndoOutcome.NOTHING_TO_RESTORE,
                        "Unable to restore attendance: those classes are no longer on the schedule.",
                    )
            self._actions.delete(action.action_id)
        except StoreError:
            logger.exception("Undo: reverting action %s failed for user %s", action.action_id, user_id)
            return UndoResult(UndoOutcome.STORE_ERROR, GENERIC_FAILURE_MESSAGE)

        noun = "attendance" if action.action_type == ActionType.ATTEND else "absence"
        logger.info("User %s undid %s action %s (%d classes)", user_id, noun, action.action_id, count)
        return UndoResult(UndoOutcome.UNDONE, f"Undid {noun} for {count} {_plural(count)}.", class_count=count)

    def _revert_attend(self, action: AttendanceAction) -> int:
        # The rows were created by this very action; deleting a missing row is a no-op.
        self._attendance.delete_bulk(user_id=action.user_id, class_ids=list(action.affected_class_ids))
        return len(action.affected_class_ids)

    def _revert_absent(self, action: AttendanceAction, *, now: datetime) -> int | None:
        """Rows actually re-created; None when no affected class is still scheduled."""

        classes = self._schedules.get_by_ids(list(action.affected_class_ids))
        if not classes:
            return None
        return self._attendance.restore_bulk(user_id=action.user_id, classes=classes, checkin_time=now)

    def prune_older_than(self, days: int, *, now: datetime | None = None) -> int:
        """Drop log entries older than `days`; they can never be undone anyway."""

        now = now or now_local(self._tz)
        removed = self._actions.prune_before(now - timedelta(days=int(days)))
        logger.info("Pruned %d action log entries older than %d days", removed, days)
        return removed
