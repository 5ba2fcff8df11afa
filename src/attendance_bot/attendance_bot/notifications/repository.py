from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence

from ..core.enums import NotificationJob
from .model import BriefRecipient, PendingReminder, UserSettings


class UserSettingsRepository(Protocol):
    def get(self, user_id: str) -> UserSettings:
        raise NotImplementedError

    def toggle(self, user_id: str, job: NotificationJob) -> bool:
        """Flip the opt-in for `job` (creating the row if needed); returns the new value."""

        raise NotImplementedError


class NotificationRepository(Protocol):
    """Recipients of scheduled jobs.

    Both methods claim what they return: a reminder or brief handed out once
    is never handed out again, even if sending it later fails.
    """

    def claim_pending_reminders(self, *, window_start: datetime, window_end: datetime) -> Sequence[PendingReminder]:
        raise NotImplementedError

    def claim_brief_recipients(self, brief_date: date) -> Sequence[BriefRecipient]:
        raise NotImplementedError
