from __future__ import annotations

import logging
import secrets
import string
from typing import NamedTuple, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from refbot.db.models import Referral, User
from refbot.db.models.referral import REFERRAL_CODE_LENGTH
from refbot.db.session import STORE_ERRORS, session_scope
from refbot.db.upsert import insert_or_ignore

log = logging.getLogger(__name__)

# 62 symbols; 62**8 ~ 2.18e14 codes
ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits


class ReferralStoreError(RuntimeError):
    pass


class ReferralCodeExhausted(ReferralStoreError):
    pass


class RandomSource(Protocol):
    def choice(self, seq: Sequence[str]) -> str: ...


class Inviter(NamedTuple):
    user_id: int
    username: str


def generate_code(rng: RandomSource, length: int = REFERRAL_CODE_LENGTH) -> str:
    return "".join(rng.choice(ALPHABET) for _ in range(length))


def deep_link(bot_username: str, code: str) -> str:
    return f"https://t.me/{bot_username}?start={code}"


class ReferralLedger:
    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        *,
        rng: RandomSource | None = None,
        max_attempts: int = 5,
    ) -> None:
        self._sessionmaker = sessionmaker
        self._rng = rng if rng is not None else secrets.SystemRandom()
        self._max_attempts = max(1, int(max_attempts))

    async def create_code(self, user_id: int) -> str:
        """Generate and store a new referral code for user_id.

        A code that already exists is left alone and a new one is drawn, so
        the returned code is always the stored one.
        """
        try:
            async with session_scope(self._sessionmaker) as session:
                for attempt in range(1, self._max_attempts + 1):
                    code = generate_code(self._rng)
                    stmt = insert_or_ignore(
                        session,
                        Referral,
                        conflict_on=["referral_code"],
                        referral_code=code,
                        user_id=int(user_id),
                    ).returning(Referral.referral_code)
                    stored = (await session.execute(stmt)).scalar_one_or_none()
                    if stored is not None:
                        await session.commit()
                        log.info("referral_code_created", extra={"tg_id": user_id, "referral_code": code})
                        return code
                    log.warning(
                        "referral_code_collision attempt=%s",
                        attempt,
                        extra={"tg_id": user_id, "referral_code": code},
                    )
        except STORE_ERRORS as e:
            raise ReferralStoreError(f"failed to store referral code for user {user_id}") from e

        raise ReferralCodeExhausted(f"no free referral code after {self._max_attempts} attempts")

    async def resolve_code(self, code: str) -> Inviter | None:
        """Return the inviter owning code, or None when the code is unknown."""
        code = (code or "").strip()
        if not code:
            return None

        q = (
            select(User.user_id, User.username)
            .select_from(Referral)
            .join(User, Referral.user_id == User.user_id)
            .where(Referral.referral_code == code)
            .limit(1)
        )
        try:
            async with session_scope(self._sessionmaker) as session:
                row = (await session.execute(q)).first()
        except STORE_ERRORS as e:
            raise ReferralStoreError(f"failed to resolve referral code {code!r}") from e

        if row is None:
            return None
        return Inviter(user_id=int(row.user_id), username=row.username or "")
