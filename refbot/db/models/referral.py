from __future__ import annotations

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from refbot.db.base import Base

REFERRAL_CODE_LENGTH = 8


class Referral(Base):
    """Referral code owned by the inviting user.

    Rows are immutable: a code is never reassigned or deleted.
    """

    __tablename__ = "referrals"

    referral_code: Mapped[str] = mapped_column(String(REFERRAL_CODE_LENGTH), primary_key=True)
    user_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("users.user_id"), nullable=True)
