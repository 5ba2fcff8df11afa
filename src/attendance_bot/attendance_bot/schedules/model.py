from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class ClassRecord:
    """One scheduled class occurrence, owned by the timetable."""

    class_id: str
    course_id: str
    course_name: str
    is_lab: bool
    class_date: date
    start_time: datetime
    end_time: datetime
    batch_id: str
    venue: Optional[str] = None


@dataclass(frozen=True)
class Enrollment:
    user_id: str
    batch_id: str
    course_ids: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ScheduleEntry:
    """Read-model for /today: a class plus whether the user is marked present."""

    record: ClassRecord
    is_marked: bool = False
