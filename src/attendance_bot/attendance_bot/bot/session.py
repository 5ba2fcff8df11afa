from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from telegram import Bot
from telegram.request import HTTPXRequest


@asynccontextmanager
async def open_bot(token: str) -> AsyncIterator[Bot]:
    """A Bot whose HTTP client lives for one request.

    Flask runs every async view on its own event loop, so the client cannot be
    shared across requests. Bot.initialize() is not used: it would call getMe
    on every update, and nothing here reads bot.bot. Only the request object
    is started, so the first API call is the handler's own.
    """

    request = HTTPXRequest()
    async with request:
        yield Bot(token=token, request=request, get_updates_request=request)
