from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ActionType, UndoOutcome


@dataclass(frozen=True)
class AttendanceAction:
    """One entry of the append/consume action log."""

    action_id: int
    user_id: str
    action_type: ActionType
    affected_class_ids: tuple[str, ...]
    created_at: datetime


@dataclass(frozen=True)
class AuditWriteResult:
    """Outcome of a best-effort audit write. Callers may ignore it."""

    written: bool
    skipped: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class UndoResult:
    outcome: UndoOutcome
    message: str
    class_count: int = 0

    @property
    def success(self) -> bool:
        return self.outcome == UndoOutcome.UNDONE
