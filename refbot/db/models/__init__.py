from .user import User
from .referral import Referral

__all__ = [
    "User",
    "Referral",
]
