from __future__ import annotations

from ..bot.context import BotContext
from ..bot.router import UpdateRouter
from ..container import Container
from .messages import DAILY_BRIEF_OFF, DAILY_BRIEF_ON, REMINDERS_OFF, REMINDERS_ON


def register(router: UpdateRouter, container: Container) -> None:
    notifications = container.notification_service

    @router.command("remind_me")
    async def remind_me(ctx: BotContext) -> None:
        enabled = notifications.toggle_reminders(ctx.user_id)
        await ctx.reply(REMINDERS_ON if enabled else REMINDERS_OFF)

    @router.command("daily_brief")
    async def daily_brief(ctx: BotContext) -> None:
        enabled = notifications.toggle_daily_brief(ctx.user_id)
        await ctx.reply(DAILY_BRIEF_ON if enabled else DAILY_BRIEF_OFF)
