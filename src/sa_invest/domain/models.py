"""Domain models for sa_invest — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Investment:
    id: str
    investor_id: str
    target_type: str                 # InvestmentTargetType value
    target_id: str
    target_name: str
    amount: int                      # stake in coins, > 0
    return_rate: int                 # whole percent, fixed at creation
    status: str                      # InvestmentStatus value
    payout: int | None = None        # set on withdrawal
    created_at: datetime | None = None
    withdrawn_at: datetime | None = None


@dataclass
class PortfolioTotals:
    active_count: int
    active_stake: int
    active_value: int                # what the active stakes would pay out today
    realized_payout: int             # sum of payouts of withdrawn investments
    realized_stake: int
