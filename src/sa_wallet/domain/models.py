"""Domain models for sa_wallet — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class CoinTransaction:
    id: int                          # BIGSERIAL
    user_id: str
    type: str                        # TransactionType value
    amount: int                      # coins, positive=income negative=expense
    balance_after: int               # users.coins snapshot after this movement
    reference_type: str | None = None
    reference_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None


@dataclass
class Gift:
    """Immutable record of one coin transfer between two users."""

    id: str
    sender_id: str
    receiver_id: str
    amount: int
    gift_type: str
    post_id: str | None = None
    created_at: datetime | None = None
