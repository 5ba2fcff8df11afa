from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TelegramLink:
    chat_id: int
    user_id: str
