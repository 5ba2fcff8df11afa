from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import MarkStatus


@dataclass(frozen=True)
class AttendanceDelta:
    """A row whose existence means "user attended this class"."""

    user_id: str
    class_id: str
    course_id: str
    class_time: datetime
    checkin_time: datetime
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MarkResult:
    class_id: str
    status: MarkStatus


@dataclass(frozen=True)
class DeleteResult:
    class_id: str
    deleted: bool


@dataclass(frozen=True)
class AttendanceStatusRow:
    class_id: str
    is_marked: bool


@dataclass(frozen=True)
class IndexedMarkResult:
    """MarkResult zipped back onto the schedule position the user picked."""

    index: int
    class_id: str
    course_name: str
    status: MarkStatus


@dataclass(frozen=True)
class IndexedDeleteResult:
    index: int
    class_id: str
    course_name: str
    deleted: bool
