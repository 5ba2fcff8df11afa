from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from telegram import Bot, InlineKeyboardMarkup, Update
from telegram.constants import ChatAction, ParseMode
from telegram.error import TelegramError

logger = logging.getLogger(__name__)


def parse_command(text: Optional[str]) -> tuple[Optional[str], list[str]]:
    """Split "/attend@SomeBot 1 2" into ("attend", ["1", "2"])."""

    if not text or not text.startswith("/"):
        return None, []

    head, *args = text.split()
    command = head[1:].split("@", 1)[0].lower()
    return (command or None), args


class BotContext(ABC):
    """What a handler may do with one incoming update."""

    def __init__(self, *, chat_id: Optional[int], text: Optional[str] = None, callback_data: Optional[str] = None):
        self.chat_id = chat_id
        self.text = text
        self.callback_data = callback_data
        self.command, self.args = parse_command(text) if callback_data is None else (None, [])
        self.user_id: Optional[str] = None

    @property
    def is_callback(self) -> bool:
        return self.callback_data is not None

    @abstractmethod
    async def reply(self, text: str, *, reply_markup: InlineKeyboardMarkup | None = None, markdown: bool = False) -> None:
        raise NotImplementedError

    @abstractmethod
    async def answer(self, text: str | None = None, *, show_alert: bool = False) -> None:
        """Answer the callback query (stops the client's loading spinner)."""

        raise NotImplementedError

    @abstractmethod
    async def edit_text(self, text: str, *, markdown: bool = False) -> None:
        raise NotImplementedError

    @abstractmethod
    async def edit_markup(self, reply_markup: InlineKeyboardMarkup) -> None:
        raise NotImplementedError

    async def typing(self) -> None:
        """Typing indicator; never fails the command."""


class TelegramContext(BotContext):
    def __init__(self, update: Update, bot: Bot):
        chat = update.effective_chat
        query = update.callback_query
        message = update.message
        super().__init__(
            chat_id=chat.id if chat else None,
            text=message.text if message else None,
            callback_data=query.data if query else None,
        )
        self._update = update
        self._bot = bot

    @staticmethod
    def _parse_mode(markdown: bool) -> str | None:
        return ParseMode.MARKDOWN if markdown else None

    async def reply(self, text: str, *, reply_markup: InlineKeyboardMarkup | None = None, markdown: bool = False) -> None:
        if self.chat_id is None:
            logger.warning("Dropping reply for update without chat: %r", text[:40])
            return
        await self._bot.send_message(
            chat_id=self.chat_id,
            text=text,
            reply_markup=reply_markup,
            parse_mode=self._parse_mode(markdown),
        )

    async def answer(self, text: str | None = None, *, show_alert: bool = False) -> None:
        query = self._update.callback_query
        if query is not None:
            await query.answer(text=text, show_alert=show_alert)

    async def edit_text(self, text: str, *, markdown: bool = False) -> None:
        query = self._update.callback_query
        if query is not None:
            await query.edit_message_text(text, parse_mode=self._parse_mode(markdown))

    async def edit_markup(self, reply_markup: InlineKeyboardMarkup) -> None:
        query = self._update.callback_query
        if query is not None:
            await query.edit_message_reply_markup(reply_markup=reply_markup)

    async def typing(self) -> None:
        if self.chat_id is None:
            return
        try:
            await self._bot.send_chat_action(chat_id=self.chat_id, action=ChatAction.TYPING)
        except TelegramError as exc:
            logger.debug("Typing indicator failed for chat %s: %s", self.chat_id, exc)
