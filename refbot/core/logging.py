import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

# extra= keys copied into the JSON line when present and not None
CONTEXT_FIELDS = ("corr_id", "tg_id", "update_id", "referral_code")

# aiogram logs one INFO line per processed update here
AIOGRAM_EVENT_LOGGER = "aiogram.event"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (k, v) for k in CONTEXT_FIELDS if (v := getattr(record, k, None)) is not None
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str | None = None, *, debug: bool = False, stream: TextIO | None = None) -> None:
    """JSON logs to stdout.

    With debug off the per-update aiogram lines are dropped to WARNING;
    with debug on everything goes out at DEBUG regardless of LOG_LEVEL.
    """
    level = "DEBUG" if debug else (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.handlers.clear()
    root.addHandler(handler)
    logging.getLogger(AIOGRAM_EVENT_LOGGER).setLevel(logging.NOTSET if debug else logging.WARNING)
