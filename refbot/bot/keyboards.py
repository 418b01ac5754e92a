from aiogram.types import ReplyKeyboardMarkup
from aiogram.utils.keyboard import ReplyKeyboardBuilder

from refbot.bot.texts import BTN_GENERATE_LINK, BTN_SHARE_CONTACT


def kb_main() -> ReplyKeyboardMarkup:
    b = ReplyKeyboardBuilder()
    b.button(text=BTN_SHARE_CONTACT, request_contact=True)
    b.button(text=BTN_GENERATE_LINK)
    # both buttons on one row
    b.adjust(2)
    return b.as_markup(resize_keyboard=True)


def kb_request_contact() -> ReplyKeyboardMarkup:
    b = ReplyKeyboardBuilder()
    b.button(text=BTN_SHARE_CONTACT, request_contact=True)
    b.adjust(1)
    return b.as_markup(resize_keyboard=True)
