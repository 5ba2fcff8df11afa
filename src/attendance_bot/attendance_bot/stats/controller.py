from __future__ import annotations

import logging

from ..bot.context import BotContext
from ..bot.formatters import format_course_attendance
from ..bot.router import UpdateRouter
from ..container import Container
from ..core.exceptions import StoreError

logger = logging.getLogger(__name__)


def register(router: UpdateRouter, container: Container) -> None:
    stats = container.stats_service

    @router.command("status", "s")
    async def status(ctx: BotContext) -> None:
        try:
            courses = stats.get_course_attendance(ctx.user_id)
        except StoreError:
            logger.exception("/status failed for user %s", ctx.user_id)
            await ctx.reply("Couldn't load your attendance data right now. Try again in a moment.")
            return

        if not courses:
            await ctx.reply("❌ No courses found.")
            return
        await ctx.reply(format_course_attendance(courses), markdown=True)
