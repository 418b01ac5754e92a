from __future__ import annotations

from enum import Enum

from aiogram.filters import BaseFilter
from aiogram.types import Message

from refbot.bot.texts import BTN_GENERATE_LINK, BTN_SHARE_CONTACT


class EventKind(str, Enum):
    START = "start"
    SHARE_CONTACT = "share_contact"
    GENERATE_LINK = "generate_link"
    CONTACT = "contact"


_TEXT_KINDS = {
    BTN_SHARE_CONTACT: EventKind.SHARE_CONTACT,
    BTN_GENERATE_LINK: EventKind.GENERATE_LINK,
}


def _split_command(text: str) -> tuple[str, str]:
    # "/start@my_bot abc" -> ("start", "abc")
    head, _, args = text.partition(" ")
    command = head[1:].split("@", 1)[0].lower()
    return command, args.strip()


def classify_message(message: Message) -> EventKind | None:
    """Map an incoming message to the event kind it triggers, if any."""
    text = (message.text or "").strip()
    if text.startswith("/"):
        command, _ = _split_command(text)
        return EventKind.START if command == "start" else None
    if message.contact is not None:
        return EventKind.CONTACT
    return _TEXT_KINDS.get(text)


def parse_start_payload(text: str | None) -> str:
    """`/start <code>` -> code, empty string when there is no argument."""
    text = (text or "").strip()
    if not text.startswith("/"):
        return ""
    _, args = _split_command(text)
    return args


class EventKindFilter(BaseFilter):
    def __init__(self, kind: EventKind) -> None:
        self.kind = kind

    async def __call__(self, message: Message) -> bool:
        return classify_message(message) is self.kind
