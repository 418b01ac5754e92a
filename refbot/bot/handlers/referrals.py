from __future__ import annotations

import logging

from aiogram import Bot
from aiogram.types import Message

from refbot.bot import texts
from refbot.services.referrals.service import ReferralLedger, ReferralStoreError, deep_link

log = logging.getLogger(__name__)


async def on_generate_link(message: Message, bot: Bot, ledger: ReferralLedger, bot_username: str) -> None:
    tg_id = message.from_user.id
    try:
        code = await ledger.create_code(tg_id)
    except ReferralStoreError:
        # no reply: the user can press the button again
        log.exception("referral_link_failed", extra={"tg_id": tg_id})
        return

    link = deep_link(bot_username, code)
    await bot.send_message(chat_id=message.chat.id, text=texts.REFERRAL_LINK.format(link=link))
