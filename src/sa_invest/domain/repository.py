"""Repository Protocol for investments.

Coin movements for funding and withdrawal go through the wallet repository;
this protocol only owns the investment rows.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_invest.domain.models import Investment, PortfolioTotals


class InvestmentRepositoryProtocol(Protocol):
    async def create(
        self,
        db: AsyncSession,
        investment_id: str,
        investor_id: str,
        target_type: str,
        target_id: str,
        target_name: str,
        amount: int,
        return_rate: int,
    ) -> Investment: ...

    async def get(self, db: AsyncSession, investment_id: str) -> Investment | None: ...

    async def mark_withdrawn(
        self, db: AsyncSession, investment_id: str, investor_id: str, payout: int
    ) -> Investment | None: ...

    async def list_for_investor(
        self, db: AsyncSession, investor_id: str, status: str | None, limit: int
    ) -> list[Investment]: ...

    async def totals(self, db: AsyncSession, investor_id: str) -> PortfolioTotals: ...
