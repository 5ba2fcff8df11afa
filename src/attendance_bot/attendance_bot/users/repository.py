from __future__ import annotations

from typing import Optional, Protocol

from .model import TelegramLink


class TelegramLinkRepository(Protocol):
    def get_by_chat_id(self, chat_id: int) -> Optional[TelegramLink]:
        raise NotImplementedError

    def delete(self, chat_id: int) -> bool:
        """Remove the chat -> user mapping. Returns False when nothing was linked."""

        raise NotImplementedError
