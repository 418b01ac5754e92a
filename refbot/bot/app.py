from __future__ import annotations

import logging
import secrets

from aiogram import Bot, Dispatcher

from refbot.bot.middlewares import CorrelationIdMiddleware
from refbot.bot.router import build_router
from refbot.core.config import Settings
from refbot.db.session import init_engine
from refbot.services.referrals.service import ReferralLedger
from refbot.services.users.service import UserRegistry

log = logging.getLogger(__name__)


def build_dispatcher(
    *,
    registry: UserRegistry,
    ledger: ReferralLedger,
    bot_username: str,
    debug: bool = False,
) -> Dispatcher:
    # registry/ledger/bot_username reach handlers as keyword arguments
    dp = Dispatcher(registry=registry, ledger=ledger, bot_username=bot_username)
    # outer: runs before the filters, so unmatched messages are logged too
    dp.message.outer_middleware(CorrelationIdMiddleware(debug=debug))
    dp.include_router(build_router())
    return dp


async def run_bot(settings: Settings) -> None:
    engine, sessionmaker = init_engine(settings.database_url)
    bot = Bot(token=settings.bot_token)
    try:
        # fails fast on a bad token
        me = await bot.get_me()
        bot_username = settings.bot_username or me.username
        log.info("bot_authorized username=%s", me.username)

        dp = build_dispatcher(
            registry=UserRegistry(sessionmaker),
            ledger=ReferralLedger(
                sessionmaker,
                rng=secrets.SystemRandom(),
                max_attempts=settings.referral_code_attempts,
            ),
            bot_username=bot_username,
            debug=settings.bot_debug,
        )

        log.info("bot_start")
        await dp.start_polling(
            bot,
            polling_timeout=settings.polling_timeout,
            allowed_updates=["message"],
        )
    finally:
        await bot.session.close()
        await engine.dispose()
