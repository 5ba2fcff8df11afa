"""Selection state for the multi-select attendance keyboard.

The bot keeps no session between button taps. Which classes are selected
travels inside the callback payload as a bit mask, so every tap carries the
full state and must be re-validated against the schedule fetched for that
tap (the schedule may have changed, or the payload may come from an old
keyboard).

Payload layout: ``<action>:<YYYY-MM-DD>:<arg2>:<arg3>``

* ``select:<date>:<bit index>:<mask>`` flip one class
* ``confirm:<date>:attend|absent:<mask>`` apply the selection
* ``attend-all:<date>`` / ``absent-all:<date>``
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.validators import require_int_in_range, require_iso_date
from ..core.constants import MAX_SELECTABLE_CLASSES
from ..core.enums import ActionType, CallbackAction
from ..core.exceptions import ValidationError

MAX_MASK = (1 << MAX_SELECTABLE_CLASSES) - 1


def toggle(mask: int, index: int) -> int:
    """Flip bit `index` (0-based)."""
    return mask ^ (1 << index)


def is_selected(mask: int, index: int) -> bool:
    return (mask >> index) & 1 == 1


def to_indices(mask: int, count: int) -> list[int]:
    """Ascending 1-based indices whose bit is set, ignoring bits >= count."""
    return [i + 1 for i in range(count) if is_selected(mask, i)]


@dataclass(frozen=True)
class SelectionPayload:
    action: CallbackAction
    class_date: date
    index: Optional[int] = None
    mask: int = 0
    action_type: Optional[ActionType] = None

    def encode(self) -> str:
        day = self.class_date.isoformat()
        if self.action == CallbackAction.SELECT:
            return f"{self.action.value}:{day}:{self.index}:{self.mask}"
        if self.action == CallbackAction.CONFIRM:
            return f"{self.action.value}:{day}:{self.action_type.value}:{self.mask}"
        return f"{self.action.value}:{day}"

    def check_against(self, count: int) -> None:
        """Re-validate against the freshly fetched schedule length."""

        if count <= 0:
            raise ValidationError("No classes found for this date.")
        if self.action == CallbackAction.SELECT and self.index >= min(count, MAX_SELECTABLE_CLASSES):
            raise ValidationError("Invalid class selection")


def select_payload(class_date: date, index: int, mask: int) -> str:
    return SelectionPayload(CallbackAction.SELECT, class_date, index=index, mask=mask).encode()


def confirm_payload(class_date: date, action_type: ActionType, mask: int) -> str:
    return SelectionPayload(CallbackAction.CONFIRM, class_date, mask=mask, action_type=action_type).encode()


def bulk_payload(action: CallbackAction, class_date: date) -> str:
    return SelectionPayload(action, class_date).encode()


def parse_payload(data: str) -> SelectionPayload:
    """Parse and validate everything that can be checked without the schedule."""

    if not data:
        raise ValidationError("Invalid request")

    parts = data.split(":")
    try:
        action = CallbackAction(parts[0])
    except ValueError as exc:
        raise ValidationError("Invalid action") from exc

    if action in (CallbackAction.ATTEND_ALL, CallbackAction.ABSENT_ALL):
        if len(parts) != 2:
            raise ValidationError("Invalid data format")
        return SelectionPayload(action, require_iso_date(parts[1]))

    if len(parts) != 4:
        raise ValidationError("Invalid data format")

    class_date = require_iso_date(parts[1])
    mask = require_int_in_range(parts[3], "selection", minimum=0, maximum=MAX_MASK)

    if action == CallbackAction.SELECT:
        index = require_int_in_range(parts[2], "selection", minimum=0, maximum=MAX_SELECTABLE_CLASSES - 1)
        return SelectionPayload(action, class_date, index=index, mask=mask)

    try:
        action_type = ActionType(parts[2])
    except ValueError as exc:
        raise ValidationError("Invalid action") from exc
    return SelectionPayload(action, class_date, mask=mask, action_type=action_type)
