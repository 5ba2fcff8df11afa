from __future__ import annotations

from ..bot.context import BotContext
from ..bot.formatters import format_schedule
from ..bot.router import UpdateRouter
from ..container import Container


def register(router: UpdateRouter, container: Container) -> None:
    schedule = container.schedule_service
    tz = container.settings.tz

    @router.command("today")
    async def today(ctx: BotContext) -> None:
        day = schedule.today()
        entries = schedule.get_day_overview(ctx.user_id, day)
        if not entries:
            await ctx.reply("📭 You have no classes scheduled for today.")
            return
        await ctx.reply(format_schedule("Today's Schedule", day, entries, tz=tz), markdown=True)

    @router.command("tomorrow")
    async def tomorrow(ctx: BotContext) -> None:
        day = schedule.tomorrow()
        classes = schedule.get_classes_for_date(ctx.user_id, day)
        if not classes:
            await ctx.reply("No classes scheduled for tomorrow.")
            return
        await ctx.reply(format_schedule("Tomorrow's Schedule", day, classes, tz=tz), markdown=True)
