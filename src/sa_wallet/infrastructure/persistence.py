"""WalletRepository — concrete implementation of WalletRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A debit guards with `coins >= :amount` in the WHERE clause, so two
concurrent debits can never both pass a balance check against a stale
read. A result of 0 rows means the user is missing or the balance is short.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.errors import InsufficientFundsError, InternalError, UserNotFoundError
from src.sa_wallet.domain.models import CoinTransaction, Gift

# ---------------------------------------------------------------------------
# SQL: users.coins mutations
# ---------------------------------------------------------------------------

_DEBIT_SQL = text("""
    UPDATE users
    SET coins = coins - :amount,
        updated_at = NOW()
    WHERE id = :user_id AND coins >= :amount
    RETURNING coins
""")

_CREDIT_SQL = text("""
    UPDATE users
    SET coins = coins + :amount,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING coins
""")

_GET_BALANCE_SQL = text("""
    SELECT coins FROM users WHERE id = :user_id
""")

# Row locks are taken in id order so two opposite transfers cannot deadlock
_LOCK_USERS_SQL = text("""
    SELECT id FROM users
    WHERE id = ANY(CAST(:user_ids AS TEXT[]))
    ORDER BY id
    FOR UPDATE
""")

# ---------------------------------------------------------------------------
# SQL: ledger + gifts
# ---------------------------------------------------------------------------

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO coin_transactions
        (user_id, type, amount, balance_after,
         reference_type, reference_id, description)
    VALUES
        (:user_id, :type, :amount, :balance_after,
         :reference_type, :reference_id, :description)
    RETURNING id, user_id, type, amount, balance_after,
              reference_type, reference_id, description, created_at
""")

_INSERT_GIFT_SQL = text("""
    INSERT INTO gifts (id, sender_id, receiver_id, post_id, amount, gift_type)
    VALUES (:id, :sender_id, :receiver_id, :post_id, :amount, :gift_type)
    RETURNING id, sender_id, receiver_id, post_id, amount, gift_type, created_at
""")

_POST_EXISTS_SQL = text("SELECT 1 FROM posts WHERE id = :post_id")

_LIST_TRANSACTIONS_SQL = text("""
    SELECT id, user_id, type, amount, balance_after,
           reference_type, reference_id, description, created_at
    FROM coin_transactions
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:tx_type AS TEXT) IS NULL OR type = CAST(:tx_type AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")

_LIST_GIFTS_RECEIVED_SQL = text("""
    SELECT id, sender_id, receiver_id, post_id, amount, gift_type, created_at
    FROM gifts
    WHERE receiver_id = :user_id
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_LIST_GIFTS_SENT_SQL = text("""
    SELECT id, sender_id, receiver_id, post_id, amount, gift_type, created_at
    FROM gifts
    WHERE sender_id = :user_id
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")


def _row_to_transaction(row: object) -> CoinTransaction:
    return CoinTransaction(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_gift(row: object) -> Gift:
    return Gift(
        id=row.id,  # type: ignore[attr-defined]
        sender_id=row.sender_id,  # type: ignore[attr-defined]
        receiver_id=row.receiver_id,  # type: ignore[attr-defined]
        post_id=row.post_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        gift_type=row.gift_type,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class WalletRepository:
    """Concrete repository — all operations atomic at the SQL level."""

    async def get_balance(self, db: AsyncSession, user_id: str) -> int | None:
        result = await db.execute(_GET_BALANCE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return row.coins if row else None

    async def lock_users(self, db: AsyncSession, user_ids: list[str]) -> set[str]:
        """Lock the given users' rows; returns the ids that exist."""
        result = await db.execute(_LOCK_USERS_SQL, {"user_ids": sorted(set(user_ids))})
        return {row.id for row in result.fetchall()}

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        tx_type: str,
        ref_type: str | None,
        ref_id: str | None,
        description: str | None,
    ) -> CoinTransaction:
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            available = await self.get_balance(db, user_id)
            if available is None:
                raise UserNotFoundError(user_id)
            raise InsufficientFundsError(amount, available)
        return await self._record(
            db, user_id, tx_type, -amount, row.coins, ref_type, ref_id, description
        )

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        tx_type: str,
        ref_type: str | None,
        ref_id: str | None,
        description: str | None,
    ) -> CoinTransaction:
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise UserNotFoundError(user_id)
        return await self._record(
            db, user_id, tx_type, amount, row.coins, ref_type, ref_id, description
        )

    async def create_gift(
        self,
        db: AsyncSession,
        gift_id: str,
        sender_id: str,
        receiver_id: str,
        amount: int,
        gift_type: str,
        post_id: str | None,
    ) -> Gift:
        result = await db.execute(
            _INSERT_GIFT_SQL,
            {
                "id": gift_id,
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "post_id": post_id,
                "amount": amount,
                "gift_type": gift_type,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Gift insert returned no rows — this should never happen")
        return _row_to_gift(row)

    async def post_exists(self, db: AsyncSession, post_id: str) -> bool:
        result = await db.execute(_POST_EXISTS_SQL, {"post_id": post_id})
        return result.fetchone() is not None

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        tx_type: str | None,
    ) -> list[CoinTransaction]:
        result = await db.execute(
            _LIST_TRANSACTIONS_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "tx_type": tx_type,
                "limit": limit,
            },
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def list_gifts(
        self,
        db: AsyncSession,
        user_id: str,
        direction: str,
        limit: int,
    ) -> list[Gift]:
        sql = _LIST_GIFTS_SENT_SQL if direction == "sent" else _LIST_GIFTS_RECEIVED_SQL
        result = await db.execute(sql, {"user_id": user_id, "limit": limit})
        return [_row_to_gift(row) for row in result.fetchall()]

    async def _record(
        self,
        db: AsyncSession,
        user_id: str,
        tx_type: str,
        signed_amount: int,
        balance_after: int,
        ref_type: str | None,
        ref_id: str | None,
        description: str | None,
    ) -> CoinTransaction:
        result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "user_id": user_id,
                "type": tx_type,
                "amount": signed_amount,
                "balance_after": balance_after,
                "reference_type": ref_type,
                "reference_id": ref_id,
                "description": description,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows — this should never happen")
        return _row_to_transaction(row)
