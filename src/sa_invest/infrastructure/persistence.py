"""InvestmentRepository — investment rows in raw SQL.

mark_withdrawn is the single-withdrawal guard: the UPDATE only matches an
active row owned by the investor, so of two concurrent withdrawals exactly
one gets a row back.

Transaction ownership: the calling application service commits.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.enums import InvestmentStatus
from src.sa_common.errors import InternalError
from src.sa_invest.domain.models import Investment, PortfolioTotals

_COLUMNS = """
    id, investor_id, target_type, target_id, target_name, amount,
    return_rate, status, payout, created_at, withdrawn_at
"""

_INSERT_SQL = text(f"""
    INSERT INTO investments
        (id, investor_id, target_type, target_id, target_name, amount, return_rate, status)
    VALUES
        (:id, :investor_id, :target_type, :target_id, :target_name, :amount,
         :return_rate, :status)
    RETURNING {_COLUMNS}
""")

_GET_SQL = text(f"SELECT {_COLUMNS} FROM investments WHERE id = :id")

_MARK_WITHDRAWN_SQL = text(f"""
    UPDATE investments
    SET status = :withdrawn, payout = :payout, withdrawn_at = NOW()
    WHERE id = :id AND investor_id = :investor_id AND status = :active
    RETURNING {_COLUMNS}
""")

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM investments
    WHERE investor_id = :investor_id
      AND (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_TOTALS_SQL = text("""
    SELECT
        COUNT(*) FILTER (WHERE status = :active) AS active_count,
        COALESCE(SUM(amount) FILTER (WHERE status = :active), 0) AS active_stake,
        COALESCE(SUM((amount * (100 + return_rate)) / 100)
                 FILTER (WHERE status = :active), 0) AS active_value,
        COALESCE(SUM(payout) FILTER (WHERE status = :withdrawn), 0) AS realized_payout,
        COALESCE(SUM(amount) FILTER (WHERE status = :withdrawn), 0) AS realized_stake
    FROM investments
    WHERE investor_id = :investor_id
""")


def _row_to_investment(row: object) -> Investment:
    return Investment(
        id=row.id,  # type: ignore[attr-defined]
        investor_id=row.investor_id,  # type: ignore[attr-defined]
        target_type=row.target_type,  # type: ignore[attr-defined]
        target_id=row.target_id,  # type: ignore[attr-defined]
        target_name=row.target_name,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        return_rate=row.return_rate,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        payout=row.payout,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        withdrawn_at=row.withdrawn_at,  # type: ignore[attr-defined]
    )


class InvestmentRepository:
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
    ) -> Investment:
        result = await db.execute(
            _INSERT_SQL,
            {
                "id": investment_id,
                "investor_id": investor_id,
                "target_type": target_type,
                "target_id": target_id,
                "target_name": target_name,
                "amount": amount,
                "return_rate": return_rate,
                "status": InvestmentStatus.ACTIVE.value,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Investment insert returned no rows — this should never happen")
        return _row_to_investment(row)

    async def get(self, db: AsyncSession, investment_id: str) -> Investment | None:
        result = await db.execute(_GET_SQL, {"id": investment_id})
        row = result.fetchone()
        return _row_to_investment(row) if row else None

    async def mark_withdrawn(
        self, db: AsyncSession, investment_id: str, investor_id: str, payout: int
    ) -> Investment | None:
        result = await db.execute(
            _MARK_WITHDRAWN_SQL,
            {
                "id": investment_id,
                "investor_id": investor_id,
                "payout": payout,
                "active": InvestmentStatus.ACTIVE.value,
                "withdrawn": InvestmentStatus.WITHDRAWN.value,
            },
        )
        row = result.fetchone()
        return _row_to_investment(row) if row else None

    async def list_for_investor(
        self, db: AsyncSession, investor_id: str, status: str | None, limit: int
    ) -> list[Investment]:
        result = await db.execute(
            _LIST_SQL, {"investor_id": investor_id, "status": status, "limit": limit}
        )
        return [_row_to_investment(row) for row in result.fetchall()]

    async def totals(self, db: AsyncSession, investor_id: str) -> PortfolioTotals:
        result = await db.execute(
            _TOTALS_SQL,
            {
                "investor_id": investor_id,
                "active": InvestmentStatus.ACTIVE.value,
                "withdrawn": InvestmentStatus.WITHDRAWN.value,
            },
        )
        row = result.fetchone()
        return PortfolioTotals(
            active_count=int(row.active_count),  # type: ignore[union-attr]
            active_stake=int(row.active_stake),  # type: ignore[union-attr]
            active_value=int(row.active_value),  # type: ignore[union-attr]
            realized_payout=int(row.realized_payout),  # type: ignore[union-attr]
            realized_stake=int(row.realized_stake),  # type: ignore[union-attr]
        )
