"""Pydantic request/response schemas for sa_wallet API."""

from pydantic import BaseModel, Field

from src.sa_common.coins import coins_to_display
from src.sa_common.datetime_utils import iso_or_none
from src.sa_wallet.domain.models import CoinTransaction, Gift


class GiftRequest(BaseModel):
    receiver_id: str = Field(..., min_length=1, max_length=64)
    amount: int = Field(..., gt=0, strict=True)
    gift_type: str = Field(default="coins", min_length=1, max_length=50)
    post_id: str | None = Field(default=None, max_length=64)


class BalanceResponse(BaseModel):
    user_id: str
    coins: int
    coins_display: str

    @classmethod
    def of(cls, user_id: str, coins: int) -> "BalanceResponse":
        return cls(user_id=user_id, coins=coins, coins_display=coins_to_display(coins))


class GiftResponse(BaseModel):
    gift_id: str
    sender_id: str
    receiver_id: str
    amount: int
    gift_type: str
    post_id: str | None
    sender_balance: int
    created_at: str | None


class GiftItem(BaseModel):
    gift_id: str
    sender_id: str
    receiver_id: str
    amount: int
    gift_type: str
    post_id: str | None
    created_at: str | None

    @classmethod
    def from_domain(cls, g: Gift) -> "GiftItem":
        return cls(
            gift_id=g.id,
            sender_id=g.sender_id,
            receiver_id=g.receiver_id,
            amount=g.amount,
            gift_type=g.gift_type,
            post_id=g.post_id,
            created_at=iso_or_none(g.created_at),
        )


class TransactionItem(BaseModel):
    id: int
    type: str
    amount: int
    amount_display: str
    balance_after: int
    reference_type: str | None
    reference_id: str | None
    description: str | None
    created_at: str | None

    @classmethod
    def from_domain(cls, t: CoinTransaction) -> "TransactionItem":
        return cls(
            id=t.id,
            type=t.type,
            amount=t.amount,
            amount_display=coins_to_display(t.amount),
            balance_after=t.balance_after,
            reference_type=t.reference_type,
            reference_id=t.reference_id,
            description=t.description,
            created_at=iso_or_none(t.created_at),
        )


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]
    next_cursor: str | None
    has_more: bool
