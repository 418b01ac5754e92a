from __future__ import annotations

import logging

from aiogram.types import ErrorEvent

log = logging.getLogger(__name__)


async def on_error(event: ErrorEvent) -> bool:
    """Log a failed update and mark it handled so polling keeps going."""
    update = event.update
    log.error(
        "update_failed",
        exc_info=(type(event.exception), event.exception, event.exception.__traceback__),
        extra={"update_id": update.update_id},
    )
    return True
