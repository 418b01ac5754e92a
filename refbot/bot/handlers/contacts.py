from __future__ import annotations

from aiogram import Bot
from aiogram.types import Message

from refbot.bot import texts
from refbot.bot.keyboards import kb_request_contact
from refbot.services.users.service import UserRegistry


async def on_share_contact(message: Message, bot: Bot) -> None:
    await bot.send_message(
        chat_id=message.chat.id,
        text=texts.CONTACT_PROMPT,
        reply_markup=kb_request_contact(),
    )


async def on_contact(message: Message, bot: Bot, registry: UserRegistry) -> None:
    # the phone is stored on the sender, whoever's contact card was shared
    ok = await registry.attach_phone(message.from_user.id, message.contact.phone_number)
    if ok:
        await bot.send_message(chat_id=message.chat.id, text=texts.CONTACT_SAVED)
