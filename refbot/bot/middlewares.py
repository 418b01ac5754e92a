from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Update

log = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseMiddleware):
    """Adds corr_id to handler data; optionally logs every incoming message."""

    def __init__(self, debug: bool = False):
        self.debug = debug

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        update: Update | None = data.get("event_update")
        if update:
            data["corr_id"] = f"u{update.update_id}"
            data["update_id"] = update.update_id
        if self.debug:
            from_user = getattr(event, "from_user", None)
            log.debug(
                "update_received text=%r",
                getattr(event, "text", None),
                extra={
                    "corr_id": data.get("corr_id"),
                    "update_id": data.get("update_id"),
                    "tg_id": from_user.id if from_user else None,
                },
            )
        return await handler(event, data)
