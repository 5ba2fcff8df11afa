from __future__ import annotations

import logging
from typing import Optional

from .repository import TelegramLinkRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Use case: map a Telegram chat onto an attendance account."""

    def __init__(self, links: TelegramLinkRepository, *, app_base_url: str):
        self._links = links
        self._app_base_url = app_base_url.rstrip("?")

    def resolve_user(self, chat_id: int) -> Optional[str]:
        link = self._links.get_by_chat_id(chat_id)
        return link.user_id if link else None

    def connect_url(self, chat_id: int) -> str:
        return f"{self._app_base_url}?chatID={int(chat_id)}"

    def unlink(self, chat_id: int) -> bool:
        """Idempotent: unlinking an unlinked chat is not an error.

        Attendance rows and the account itself are untouched.
        """

        removed = self._links.delete(chat_id)
        logger.info("Unlinked chat %s (had_link=%s)", chat_id, removed)
        return removed
