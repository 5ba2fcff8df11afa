from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from telegram.error import NetworkError, TelegramError

from ..core.constants import GENERIC_FAILURE_MESSAGE
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from ..users.service import AccountService
from .context import BotContext

logger = logging.getLogger(__name__)

Handler = Callable[[BotContext], Awaitable[None]]

NOT_LINKED_MESSAGE = (
    "⚠️ You need to connect your account first.\n\nUse /start to link your Telegram account."
)


@dataclass(frozen=True)
class Route:
    handler: Handler
    public: bool = False


class UpdateRouter:
    """Dispatch one update to a command or callback handler.

    Non-public routes get ctx.user_id resolved from the chat link first.
    Domain and store failures end as a message to the user. Telegram API
    errors do not: network errors propagate to the webhook (503, Telegram
    redelivers) and other API errors are only logged.
    """

    def __init__(self, accounts: AccountService):
        self._accounts = accounts
        self._commands: dict[str, Route] = {}
        self._callbacks: dict[str, Route] = {}

    def command(self, *names: str, public: bool = False):
        def decorator(handler: Handler) -> Handler:
            for name in names:
                self._commands[name.lower()] = Route(handler, public)
            return handler

        return decorator

    def callback(self, *prefixes: str, public: bool = False):
        """Match callback data equal to a prefix or starting with "<prefix>:"."""

        def decorator(handler: Handler) -> Handler:
            for prefix in prefixes:
                self._callbacks[prefix] = Route(handler, public)
            return handler

        return decorator

    @property
    def commands(self) -> list[str]:
        return sorted(self._commands)

    def _match(self, ctx: BotContext) -> Optional[Route]:
        if ctx.is_callback:
            data = ctx.callback_data or ""
            exact = self._callbacks.get(data)
            if exact:
                return exact
            return self._callbacks.get(data.split(":", 1)[0])
        if ctx.command:
            return self._commands.get(ctx.command)
        return None

    async def dispatch(self, ctx: BotContext) -> bool:
        """Returns False when no route matched the update."""

        route = self._match(ctx)
        if route is None:
            if ctx.is_callback:
                await ctx.answer("This action has expired.", show_alert=True)
            return False

        try:
            if not route.public:
                self._authenticate(ctx)
            if not ctx.is_callback:
                await ctx.typing()
            await route.handler(ctx)
        except AuthorizationError as exc:
            await self._report(ctx, str(exc), alert=True)
        except ValidationError as exc:
            await self._report(ctx, str(exc))
        except StoreError:
            logger.exception("Store error handling %s for chat %s", self._describe(ctx), ctx.chat_id)
            await self._report(ctx, GENERIC_FAILURE_MESSAGE, alert=True)
        except NetworkError:
            logger.warning("Telegram unreachable handling %s for chat %s", self._describe(ctx), ctx.chat_id)
            raise
        except TelegramError:
            logger.exception("Telegram rejected a reply for %s in chat %s", self._describe(ctx), ctx.chat_id)
        except Exception:
            logger.exception("Unhandled error handling %s for chat %s", self._describe(ctx), ctx.chat_id)
            await self._report(ctx, GENERIC_FAILURE_MESSAGE, alert=True)
        return True

    def _authenticate(self, ctx: BotContext) -> None:
        user_id = self._accounts.resolve_user(ctx.chat_id) if ctx.chat_id is not None else None
        if not user_id:
            raise AuthorizationError(NOT_LINKED_MESSAGE)
        ctx.user_id = user_id

    @staticmethod
    def _describe(ctx: BotContext) -> str:
        return f"callback {ctx.callback_data!r}" if ctx.is_callback else f"/{ctx.command}"

    @staticmethod
    async def _report(ctx: BotContext, text: str, *, alert: bool = False) -> None:
        try:
            if ctx.is_callback:
                await ctx.answer(text, show_alert=alert)
            else:
                await ctx.reply(text)
        except Exception:
            logger.exception("Could not deliver error message to chat %s", ctx.chat_id)
