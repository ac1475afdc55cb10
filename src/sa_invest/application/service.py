"""InvestmentApplicationService — fund, withdraw, list.

Funding: debit the investor with an `investment` ledger row and insert the
investment in one transaction. The stake stays on the investment row until
withdrawal; no user is credited.

Withdrawal: flip status active -> withdrawn with the payout recorded, then
credit the payout with a `withdraw` ledger row, in one transaction.
"""

import logging
import random
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sa_common.coins import draw_return_rate, settlement_payout, validate_amount
from src.sa_common.enums import InvestmentStatus, ReferenceType, TransactionType
from src.sa_common.errors import InvestmentNotActiveError, InvestmentNotFoundError
from src.sa_invest.application.schemas import (
    InvestmentItem,
    PortfolioSummary,
    WithdrawResponse,
)
from src.sa_invest.domain.repository import InvestmentRepositoryProtocol
from src.sa_invest.infrastructure.persistence import InvestmentRepository
from src.sa_wallet.domain.repository import WalletRepositoryProtocol
from src.sa_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger("sa.invest")

_INVESTMENT_LIST_LIMIT = 100


class InvestmentApplicationService:
    def __init__(
        self,
        repo: InvestmentRepositoryProtocol | None = None,
        wallet: WalletRepositoryProtocol | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._repo: InvestmentRepositoryProtocol = repo or InvestmentRepository()
        self._wallet: WalletRepositoryProtocol = wallet or WalletRepository()
        self._rng = rng

    async def create_investment(
        self,
        db: AsyncSession,
        investor_id: str,
        target_type: str,
        target_id: str,
        target_name: str,
        amount: object,
    ) -> InvestmentItem:
        amount = validate_amount(amount)
        return_rate = draw_return_rate(
            settings.INVESTMENT_RETURN_MIN_PCT,
            settings.INVESTMENT_RETURN_MAX_PCT,
            self._rng,
        )
        investment_id = str(uuid.uuid4())
        try:
            tx = await self._wallet.debit(
                db,
                investor_id,
                amount,
                TransactionType.INVESTMENT.value,
                ReferenceType.INVESTMENT.value,
                investment_id,
                f"Investment in {target_name}",
            )
            investment = await self._repo.create(
                db,
                investment_id,
                investor_id,
                target_type,
                target_id,
                target_name,
                amount,
                return_rate,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Investment %s: %s staked %d on %s:%s rate=%d%% balance_after=%d",
            investment.id, investor_id, amount, target_type, target_id,
            return_rate, tx.balance_after,
        )
        return InvestmentItem.from_domain(investment)

    async def withdraw(
        self, db: AsyncSession, investor_id: str, investment_id: str
    ) -> WithdrawResponse:
        try:
            current = await self._repo.get(db, investment_id)
            if current is None or current.investor_id != investor_id:
                raise InvestmentNotFoundError(investment_id)
            if current.status != InvestmentStatus.ACTIVE.value:
                raise InvestmentNotActiveError(investment_id)
            payout = settlement_payout(current.amount, current.return_rate)
            settled = await self._repo.mark_withdrawn(db, investment_id, investor_id, payout)
            if settled is None:
                # A concurrent withdrawal won the status flip
                raise InvestmentNotActiveError(investment_id)
            if payout > 0:
                tx = await self._wallet.credit(
                    db,
                    investor_id,
                    payout,
                    TransactionType.WITHDRAW.value,
                    ReferenceType.INVESTMENT.value,
                    investment_id,
                    f"Withdrawal from {settled.target_name}",
                )
                balance_after = tx.balance_after
            else:
                # Nothing to pay back; the ledger holds no zero-amount rows
                balance_after = await self._wallet.get_balance(db, investor_id) or 0
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Investment %s withdrawn by %s: stake=%d rate=%d%% payout=%d",
            investment_id, investor_id, settled.amount, settled.return_rate, payout,
        )
        return WithdrawResponse(
            investment=InvestmentItem.from_domain(settled),
            payout=payout,
            balance_after=balance_after,
        )

    async def get_investment(
        self, db: AsyncSession, investor_id: str, investment_id: str
    ) -> InvestmentItem:
        investment = await self._repo.get(db, investment_id)
        if investment is None or investment.investor_id != investor_id:
            raise InvestmentNotFoundError(investment_id)
        return InvestmentItem.from_domain(investment)

    async def list_investments(
        self, db: AsyncSession, investor_id: str, status: str | None = None
    ) -> list[InvestmentItem]:
        rows = await self._repo.list_for_investor(db, investor_id, status, _INVESTMENT_LIST_LIMIT)
        return [InvestmentItem.from_domain(i) for i in rows]

    async def summary(self, db: AsyncSession, investor_id: str) -> PortfolioSummary:
        return PortfolioSummary.from_domain(await self._repo.totals(db, investor_id))
