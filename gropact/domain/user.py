"""User domain entity"""
from typing import Literal

from gropact.domain.base import Entity, utc_now_iso

TIER_FREE = "free"
TIER_MID = "mid"
TIER_PREMIUM = "premium"


class User(Entity):
    """
    Account identity + aggregate stats

    Aggregates (streak, completion_rate, ...) are stored display values;
    nothing recomputes them from pacts.
    """
    id: str
    name: str
    email: str
    avatar: str | None = None
    bio: str | None = None
    joined_date: str
    current_streak: int = 0
    longest_streak: int = 0
    completion_rate: int = 0
    total_pacts: int = 0
    completed_pacts: int = 0
    tier: Literal["free", "mid", "premium"] = TIER_FREE
    trust_score: int = 0
    total_verifications: int = 0
    supporter_of: list[str] = []
    password_hash: str | None = None

    @staticmethod
    def new(user_id: str, name: str, email: str, password_hash: str | None = None) -> "User":
        """Fresh account with default aggregates"""
        return User(
            id=user_id,
            name=name,
            email=email,
            joined_date=utc_now_iso(),
            password_hash=password_hash,
        )
