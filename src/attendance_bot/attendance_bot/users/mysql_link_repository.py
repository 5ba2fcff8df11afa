from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import TelegramLink
from .repository import TelegramLinkRepository


class MySQLTelegramLinkRepository(TelegramLinkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_chat_id(self, chat_id: int) -> Optional[TelegramLink]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT chat_id, user_id FROM telegram_user_mappings WHERE chat_id=%s",
                (int(chat_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return TelegramLink(chat_id=int(r["chat_id"]), user_id=str(r["user_id"]))

    def delete(self, chat_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM telegram_user_mappings WHERE chat_id=%s", (int(chat_id),))
            return cur.rowcount > 0
