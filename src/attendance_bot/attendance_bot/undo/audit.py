from __future__ import annotations

import logging
from typing import Sequence

from ..core.enums import ActionType
from ..core.exceptions import StoreError
from .model import AuditWriteResult
from .repository import ActionLogRepository

logger = logging.getLogger(__name__)


class ActionAuditLogger:
    """Best-effort writer for the undo log.

    A failed write never fails the mutation that triggered it; the only
    visible effect is that /undo cannot revert that mutation.
    """

    def __init__(self, actions: ActionLogRepository):
        self._actions = actions

    def log_action(self, user_id: str, action_type: ActionType, class_ids: Sequence[str]) -> AuditWriteResult:
        if not class_ids:
            return AuditWriteResult(written=False, skipped=True)

        try:
            self._actions.append(user_id=user_id, action_type=action_type, class_ids=list(class_ids))
        except StoreError as exc:
            logger.exception("Failed to log %s action for user %s", action_type.value, user_id)
            return AuditWriteResult(written=False, error=str(exc))

        return AuditWriteResult(written=True)
