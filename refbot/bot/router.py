from __future__ import annotations

from typing import Any, Awaitable, Callable

from aiogram import Router

from refbot.bot.events import EventKind, EventKindFilter
from refbot.bot.handlers.contacts import on_contact, on_share_contact
from refbot.bot.handlers.errors import on_error
from refbot.bot.handlers.referrals import on_generate_link
from refbot.bot.handlers.start import on_start

Handler = Callable[..., Awaitable[Any]]

HANDLERS: dict[EventKind, Handler] = {
    EventKind.START: on_start,
    EventKind.SHARE_CONTACT: on_share_contact,
    EventKind.GENERATE_LINK: on_generate_link,
    EventKind.CONTACT: on_contact,
}


def build_router(handlers: dict[EventKind, Handler] | None = None) -> Router:
    router = Router(name="refbot")
    for kind, handler in (handlers or HANDLERS).items():
        router.message.register(handler, EventKindFilter(kind))
    router.errors.register(on_error)
    return router
