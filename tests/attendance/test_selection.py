from __future__ import annotations

from datetime import date

import pytest

from src.attendance_bot.attendance_bot.attendance.selection import (
    MAX_MASK,
    bulk_payload,
    confirm_payload,
    parse_payload,
    select_payload,
    to_indices,
    toggle,
)
from src.attendance_bot.attendance_bot.core.enums import ActionType, CallbackAction
from src.attendance_bot.attendance_bot.core.exceptions import ValidationError

DAY = date(2026, 3, 2)


def test_toggle_is_self_inverse():
    for mask in (0, 1, 0b1010, MAX_MASK):
        for index in (0, 3, 30):
            assert toggle(toggle(mask, index), index) == mask


def test_toggle_flips_only_one_bit():
    assert toggle(0, 0) == 1
    assert toggle(0b101, 2) == 0b001
    assert toggle(0b101, 1) == 0b111


def test_to_indices_is_one_based_ascending_and_bounded_by_count():
    assert to_indices(0b1011, 8) == [1, 2, 4]
    # bits beyond the schedule length are ignored
    assert to_indices(0b1011, 2) == [1, 2]
    assert to_indices(0, 5) == []


def test_parse_select_payload():
    payload = parse_payload(select_payload(DAY, 2, 0b101))

    assert payload.action == CallbackAction.SELECT
    assert payload.class_date == DAY
    assert payload.index == 2
    assert payload.mask == 0b101


def test_parse_confirm_payload():
    payload = parse_payload(confirm_payload(DAY, ActionType.ABSENT, 6))

    assert payload.action == CallbackAction.CONFIRM
    assert payload.action_type == ActionType.ABSENT
    assert payload.mask == 6


def test_parse_bulk_payload():
    payload = parse_payload(bulk_payload(CallbackAction.ATTEND_ALL, DAY))
    assert payload.action == CallbackAction.ATTEND_ALL
    assert payload.class_date == DAY


def test_payload_wire_format():
    assert select_payload(DAY, 0, 1) == "select:2026-03-02:0:1"
    assert confirm_payload(DAY, ActionType.ATTEND, 5) == "confirm:2026-03-02:attend:5"
    assert bulk_payload(CallbackAction.ABSENT_ALL, DAY) == "absent-all:2026-03-02"


@pytest.mark.parametrize(
    "data",
    [
        "",
        "bogus:2026-03-02:0:0",
        "select:2026-03-02:0",
        "select:2026-13-02:0:1",
        "select:02-03-2026:0:1",
        "select:2026-03-02:-1:0",
        "select:2026-03-02:31:0",
        "select:2026-03-02:0:x",
        "select:2026-03-02:0:1e3",
        f"select:2026-03-02:0:{MAX_MASK + 1}",
        "confirm:2026-03-02:maybe:1",
        "attend-all:2026-03-02:extra",
        "absent-all:yesterday",
    ],
)
def test_parse_payload_rejects_malformed_data(data):
    with pytest.raises(ValidationError):
        parse_payload(data)


def test_check_against_rejects_index_past_schedule():
    payload = parse_payload("select:2026-03-02:3:0")

    payload.check_against(4)
    with pytest.raises(ValidationError, match="Invalid class selection"):
        payload.check_against(3)


def test_check_against_rejects_empty_schedule():
    payload = parse_payload("confirm:2026-03-02:attend:1")
    with pytest.raises(ValidationError, match="No classes found"):
        payload.check_against(0)
