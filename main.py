"""
Referral bot entrypoint.
Required env vars:
 - BOT_TOKEN
 - DATABASE_URL, or DB_USER / DB_PASSWORD / DB_HOST / DB_PORT / DB_NAME (+ optional DB_SSLMODE)
A .env file next to the process is loaded first if present.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

from refbot.bot.app import run_bot
from refbot.core.config import load_settings
from refbot.core.logging import setup_logging

log = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parent / "alembic.ini"


def _run_alembic_upgrade_head() -> None:
    """Apply migrations at boot. A failure here stops the bot."""
    subprocess.check_call(
        [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI), "upgrade", "head"],
        cwd=ALEMBIC_INI.parent,
    )
    log.info("alembic_upgrade_head_applied")


def main() -> None:
    load_dotenv()
    settings = load_settings()
    setup_logging(debug=settings.bot_debug)
    if settings.run_migrations:
        _run_alembic_upgrade_head()
    asyncio.run(run_bot(settings))


if __name__ == "__main__":
    main()
