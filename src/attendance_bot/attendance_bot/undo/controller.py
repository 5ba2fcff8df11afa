from __future__ import annotations

from ..bot.context import BotContext
from ..bot.router import UpdateRouter
from ..container import Container


def register(router: UpdateRouter, container: Container) -> None:
    @router.command("undo", "u")
    async def undo(ctx: BotContext) -> None:
        result = container.undo_service.undo_last(ctx.user_id)
        await ctx.reply(result.message)
