from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationJob


@dataclass(frozen=True)
class UserSettings:
    """Notification opt-ins; both default to off until the user toggles them."""

    user_id: str
    reminders_enabled: bool = False
    daily_brief_enabled: bool = False


@dataclass(frozen=True)
class PendingReminder:
    chat_id: int
    user_id: str
    class_id: str
    course_name: str
    start_time: datetime
    venue: Optional[str] = None


@dataclass(frozen=True)
class BriefRecipient:
    chat_id: int
    user_id: str


@dataclass(frozen=True)
class OutgoingMessage:
    chat_id: int
    text: str


@dataclass(frozen=True)
class JobReport:
    job: NotificationJob
    total: int
    sent: int
    failed: int
    duration_ms: int

    def as_dict(self) -> dict:
        data = asdict(self)
        data["job"] = self.job.value
        return data
