from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from refbot.db.models import User
from refbot.db.session import STORE_ERRORS, session_scope
from refbot.db.upsert import insert_or_ignore

log = logging.getLogger(__name__)


class UserRegistry:
    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self._sessionmaker = sessionmaker

    async def register(
        self,
        user_id: int,
        *,
        username: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> bool:
        """Insert the user unless already known.

        A repeat registration leaves the stored profile untouched. Failures are
        logged and reported as False so /start can carry on.
        """
        try:
            async with session_scope(self._sessionmaker) as session:
                stmt = insert_or_ignore(
                    session,
                    User,
                    conflict_on=["user_id"],
                    user_id=int(user_id),
                    username=username,
                    first_name=first_name,
                    last_name=last_name,
                )
                await session.execute(stmt)
                await session.commit()
        except STORE_ERRORS:
            log.exception("user_register_failed", extra={"tg_id": user_id})
            return False
        return True

    async def attach_phone(self, user_id: int, phone_number: str) -> bool:
        """Overwrite the user's phone number.

        An unknown user_id updates nothing and still counts as success.
        """
        try:
            async with session_scope(self._sessionmaker) as session:
                res = await session.execute(
                    update(User).where(User.user_id == int(user_id)).values(phone_number=phone_number)
                )
                await session.commit()
        except STORE_ERRORS:
            log.exception("user_attach_phone_failed", extra={"tg_id": user_id})
            return False

        if not res.rowcount:
            log.info("user_attach_phone_unknown_user", extra={"tg_id": user_id})
        return True

    async def get(self, user_id: int) -> User | None:
        """Read back a stored user. Store errors propagate; no handler calls this."""
        async with session_scope(self._sessionmaker) as session:
            return await session.get(User, int(user_id))
