from __future__ import annotations

from datetime import date
from typing import Sequence
from zoneinfo import ZoneInfo

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from ..attendance.selection import bulk_payload, confirm_payload, is_selected, select_payload
from ..common.datetime_utils import format_hhmm
from ..core.constants import MAX_SELECTABLE_CLASSES
from ..core.enums import ActionType, CallbackAction
from ..schedules.model import ClassRecord

RESET_CONFIRM = "reset:confirm"
RESET_CANCEL = "reset:cancel"


def attendance_keyboard(
    classes: Sequence[ClassRecord],
    class_date: date,
    mask: int,
    *,
    tz: ZoneInfo,
) -> InlineKeyboardMarkup:
    """One toggle row per class, then confirm buttons (when something is selected), then bulk buttons."""

    rows: list[list[InlineKeyboardButton]] = []

    for position, cls in enumerate(classes[:MAX_SELECTABLE_CLASSES]):
        check = "✅ " if is_selected(mask, position) else "⬜ "
        label = f"{check}{cls.course_name} ({format_hhmm(cls.start_time, tz)})"
        rows.append([InlineKeyboardButton(label, callback_data=select_payload(class_date, position, mask))])

    if mask:
        rows.append(
            [
                InlineKeyboardButton(
                    "Attend Selected 🙋", callback_data=confirm_payload(class_date, ActionType.ATTEND, mask)
                ),
                InlineKeyboardButton(
                    "Absent Selected 🙅", callback_data=confirm_payload(class_date, ActionType.ABSENT, mask)
                ),
            ]
        )

    rows.append(
        [
            InlineKeyboardButton("Attend All 🚀", callback_data=bulk_payload(CallbackAction.ATTEND_ALL, class_date)),
            InlineKeyboardButton("Absent All 😴", callback_data=bulk_payload(CallbackAction.ABSENT_ALL, class_date)),
        ]
    )
    return InlineKeyboardMarkup(rows)


def connect_keyboard(url: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[InlineKeyboardButton("🔗 Connect Account", url=url)]])


def reset_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton("✅ Yes, disconnect my account", callback_data=RESET_CONFIRM)],
            [InlineKeyboardButton("❌ Cancel", callback_data=RESET_CANCEL)],
        ]
    )
