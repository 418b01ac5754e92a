from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest
from aiogram import Bot
from aiogram.types import Chat, Contact, Message, User as TgUser
from sqlalchemy import event
from sqlalchemy.pool import StaticPool

from refbot.db.base import Base
from refbot.db.session import init_engine
from refbot.services.referrals.service import ReferralLedger
from refbot.services.users.service import UserRegistry


def _enable_sqlite_fks(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def db():
    engine, sessionmaker = init_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_fks)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield sessionmaker
    await engine.dispose()


@pytest.fixture
async def empty_db():
    """An engine with no tables: every query fails."""
    engine, sessionmaker = init_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield sessionmaker
    await engine.dispose()


@pytest.fixture
def registry(db) -> UserRegistry:
    return UserRegistry(db)


@pytest.fixture
def ledger(db) -> ReferralLedger:
    return ReferralLedger(db, rng=random.Random(20261018))


class ScriptedRandom:
    """Hands out the characters of the given codes in order."""

    def __init__(self, *codes: str) -> None:
        self._chars = iter("".join(codes))

    def choice(self, seq):
        return next(self._chars)


@dataclass
class SentMessage:
    chat_id: int
    text: str
    reply_markup: Any = None


@dataclass
class FakeBot:
    sent: list[SentMessage] = field(default_factory=list)

    async def send_message(self, chat_id: int, text: str, reply_markup: Any = None, **kwargs: Any) -> None:
        self.sent.append(SentMessage(chat_id=chat_id, text=text, reply_markup=reply_markup))

    @property
    def texts(self) -> list[str]:
        return [m.text for m in self.sent]


@pytest.fixture
def bot() -> FakeBot:
    return FakeBot()


def make_message(
    user_id: int,
    *,
    text: str | None = None,
    username: str | None = None,
    first_name: str = "Test",
    last_name: str | None = None,
    phone_number: str | None = None,
) -> Message:
    contact = None
    if phone_number is not None:
        contact = Contact(phone_number=phone_number, first_name=first_name, user_id=user_id)
    return Message(
        message_id=1,
        date=datetime.now(timezone.utc),
        chat=Chat(id=user_id, type="private"),
        from_user=TgUser(
            id=user_id,
            is_bot=False,
            first_name=first_name,
            last_name=last_name,
            username=username,
        ),
        text=text,
        contact=contact,
    )


class UnreachableSessionmaker:
    """Sessionmaker whose sessions fail to connect the way asyncpg does."""

    def __init__(self, exc: BaseException | None = None) -> None:
        self.exc = exc or ConnectionRefusedError(111, "Connect call failed ('127.0.0.1', 1)")

    def __call__(self):
        return self

    async def __aenter__(self):
        raise self.exc

    async def __aexit__(self, *exc_info) -> bool:
        return False


@pytest.fixture
def unreachable_db() -> UnreachableSessionmaker:
    return UnreachableSessionmaker()


@pytest.fixture
async def tg_bot():
    """Real aiogram Bot for Dispatcher.feed_update, with send_message recorded."""
    tg = Bot(token="42:TEST")
    recorder = FakeBot()
    tg.send_message = recorder.send_message
    tg.recorder = recorder
    yield tg
    await tg.session.close()
