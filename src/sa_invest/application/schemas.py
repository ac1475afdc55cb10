"""Pydantic request/response schemas for sa_invest API."""

from pydantic import BaseModel, Field

from src.sa_common.coins import coins_to_display, settlement_payout
from src.sa_common.datetime_utils import iso_or_none
from src.sa_common.enums import InvestmentStatus, InvestmentTargetType
from src.sa_invest.domain.models import Investment, PortfolioTotals


class CreateInvestmentRequest(BaseModel):
    target_type: InvestmentTargetType
    target_id: str = Field(..., min_length=1, max_length=64)
    target_name: str = Field(..., min_length=1, max_length=200)
    amount: int = Field(..., gt=0, strict=True)


class InvestmentItem(BaseModel):
    id: str
    investor_id: str
    target_type: str
    target_id: str
    target_name: str
    amount: int
    return_rate: int
    status: str
    current_value: int
    payout: int | None
    created_at: str | None
    withdrawn_at: str | None

    @classmethod
    def from_domain(cls, i: Investment) -> "InvestmentItem":
        return cls(
            id=i.id,
            investor_id=i.investor_id,
            target_type=i.target_type,
            target_id=i.target_id,
            target_name=i.target_name,
            amount=i.amount,
            return_rate=i.return_rate,
            status=i.status,
            current_value=(
                settlement_payout(i.amount, i.return_rate)
                if i.status == InvestmentStatus.ACTIVE.value
                else (i.payout or 0)
            ),
            payout=i.payout,
            created_at=iso_or_none(i.created_at),
            withdrawn_at=iso_or_none(i.withdrawn_at),
        )


class WithdrawResponse(BaseModel):
    investment: InvestmentItem
    payout: int
    balance_after: int


class PortfolioSummary(BaseModel):
    active_count: int
    active_stake: int
    current_value: int
    current_value_display: str
    return_pct: float  # (current_value - active_stake) / active_stake * 100, one decimal
    realized_payout: int
    realized_stake: int

    @classmethod
    def from_domain(cls, t: PortfolioTotals) -> "PortfolioSummary":
        return_pct = 0.0
        if t.active_stake > 0:
            return_pct = round((t.active_value - t.active_stake) * 100 / t.active_stake, 1)
        return cls(
            active_count=t.active_count,
            active_stake=t.active_stake,
            current_value=t.active_value,
            current_value_display=coins_to_display(t.active_value),
            return_pct=return_pct,
            realized_payout=t.realized_payout,
            realized_stake=t.realized_stake,
        )
