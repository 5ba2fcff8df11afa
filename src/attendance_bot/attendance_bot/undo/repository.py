from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ActionType
from .model import AttendanceAction


class ActionLogRepository(Protocol):
    def append(self, *, user_id: str, action_type: ActionType, class_ids: Sequence[str]) -> int:
        raise NotImplementedError

    def get_latest(self, user_id: str) -> Optional[AttendanceAction]:
        """Most recent entry by created_at (ties broken by id), or None."""

        raise NotImplementedError

    def delete(self, action_id: int) -> bool:
        raise NotImplementedError

    def prune_before(self, cutoff: datetime) -> int:
        """Delete entries created before `cutoff`. Returns rows removed."""

        raise NotImplementedError
