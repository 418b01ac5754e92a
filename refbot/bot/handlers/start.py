from __future__ import annotations

import logging

from aiogram import Bot
from aiogram.types import Message

from refbot.bot import texts
from refbot.bot.events import parse_start_payload
from refbot.bot.keyboards import kb_main
from refbot.services.referrals.service import ReferralLedger, ReferralStoreError
from refbot.services.users.service import UserRegistry

log = logging.getLogger(__name__)


async def on_start(message: Message, bot: Bot, registry: UserRegistry, ledger: ReferralLedger) -> None:
    user = message.from_user
    chat_id = message.chat.id

    # registration failure is logged inside and must not stop the welcome flow
    await registry.register(
        user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
    )

    code = parse_start_payload(message.text)
    if code:
        try:
            inviter = await ledger.resolve_code(code)
        except ReferralStoreError:
            log.exception("referral_resolve_failed", extra={"tg_id": user.id, "referral_code": code})
            inviter = None

        if inviter is not None:
            name = texts.inviter_name(inviter.user_id, inviter.username)
            await bot.send_message(chat_id=chat_id, text=texts.INVITED_BY.format(name=name))
        else:
            log.info("referral_code_not_found", extra={"tg_id": user.id, "referral_code": code})

    await bot.send_message(chat_id=chat_id, text=texts.WELCOME, reply_markup=kb_main())
