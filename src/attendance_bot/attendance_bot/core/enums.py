from __future__ import annotations

from enum import Enum


class ActionType(str, Enum):
    """Kind of attendance mutation recorded in the action log."""

    ATTEND = "attend"
    ABSENT = "absent"


class MarkStatus(str, Enum):
    """Per-class outcome of a bulk "mark present" call."""

    MARKED = "marked"
    ALREADY = "already"
    FAILED = "failed"


class CallbackAction(str, Enum):
    """First field of an attendance keyboard callback payload."""

    SELECT = "select"
    CONFIRM = "confirm"
    ATTEND_ALL = "attend-all"
    ABSENT_ALL = "absent-all"


class UndoOutcome(str, Enum):
    UNDONE = "undone"
    NOTHING_TO_UNDO = "nothing_to_undo"
    STALE = "stale"
    NOTHING_TO_RESTORE = "nothing_to_restore"
    STORE_ERROR = "store_error"


class NotificationJob(str, Enum):
    """Scheduled job name; also the per-user opt-in it is gated on."""

    REMINDERS = "reminders"
    DAILY_BRIEF = "daily-brief"
