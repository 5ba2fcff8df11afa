from __future__ import annotations

from ..bot.context import BotContext
from ..bot.formatters import HELP_TEXT, SHORTCUTS_TEXT
from ..bot.keyboards import RESET_CANCEL, RESET_CONFIRM, connect_keyboard, reset_keyboard
from ..bot.router import UpdateRouter
from ..container import Container

RESET_PROMPT = """*Account Disconnect*

This will remove the link between your Telegram and your attendance account.

*What happens:*
• Your Telegram link is removed
• You'll need to run /start to reconnect

*What's preserved:*
• All your attendance records
• Your account and course enrollments

Are you sure?"""


def register(router: UpdateRouter, container: Container) -> None:
    accounts = container.account_service

    @router.command("start", public=True)
    async def start(ctx: BotContext) -> None:
        if accounts.resolve_user(ctx.chat_id):
            await ctx.reply(
                "✅ You are already connected.\n\nYour account is active and ready to use. Type /help to see available commands."
            )
            return

        await ctx.reply(
            "👋 *Welcome*\n\n"
            "I'm your attendance assistant. To get started, link your Telegram account with your attendance profile.\n\n"
            "Tap the button below to authenticate.",
            reply_markup=connect_keyboard(accounts.connect_url(ctx.chat_id)),
            markdown=True,
        )

    @router.command("help", public=True)
    async def help_command(ctx: BotContext) -> None:
        await ctx.reply(HELP_TEXT, markdown=True)

    @router.command("shortcuts", public=True)
    async def shortcuts(ctx: BotContext) -> None:
        await ctx.reply(SHORTCUTS_TEXT, markdown=True)

    @router.command("reset")
    async def reset(ctx: BotContext) -> None:
        await ctx.reply(RESET_PROMPT, reply_markup=reset_keyboard(), markdown=True)

    @router.callback(RESET_CONFIRM, public=True)
    async def reset_confirm(ctx: BotContext) -> None:
        accounts.unlink(ctx.chat_id)
        await ctx.edit_text(
            "*Account Disconnected*\n\nYour Telegram is no longer linked.\n\nTo reconnect, use /start.",
            markdown=True,
        )
        await ctx.answer()

    @router.callback(RESET_CANCEL, public=True)
    async def reset_cancel(ctx: BotContext) -> None:
        await ctx.edit_text("Disconnect cancelled.")
        await ctx.answer()
