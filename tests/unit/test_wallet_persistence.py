"""Unit tests for WalletRepository using MagicMock AsyncSession."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sa_common.errors import InsufficientFundsError, UserNotFoundError
from src.sa_wallet.infrastructure.persistence import WalletRepository


def _result(row: object | None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    return result


def _coins_row(coins: int) -> MagicMock:
    row = MagicMock()
    row.coins = coins
    return row


def _tx_row(amount: int, balance_after: int, tx_type: str = "gift_sent") -> MagicMock:
    row = MagicMock()
    row.id = 1
    row.user_id = "alice"
    row.type = tx_type
    row.amount = amount
    row.balance_after = balance_after
    row.reference_type = "gift"
    row.reference_id = "g-1"
    row.description = None
    row.created_at = datetime.now(UTC)
    return row


@pytest.fixture
def db() -> MagicMock:
    return MagicMock()


class TestDebit:
    async def test_success_records_negative_ledger_row(self, db: MagicMock) -> None:
        db.execute = AsyncMock(
            side_effect=[_result(_coins_row(60)), _result(_tx_row(-40, 60))]
        )

        tx = await WalletRepository().debit(db, "alice", 40, "gift_sent", "gift", "g-1", None)

        assert tx.amount == -40
        assert tx.balance_after == 60
        ledger_params = db.execute.await_args_list[1].args[1]
        assert ledger_params["amount"] == -40
        assert ledger_params["balance_after"] == 60

    async def test_guard_miss_with_existing_user_is_insufficient(self, db: MagicMock) -> None:
        db.execute = AsyncMock(side_effect=[_result(None), _result(_coins_row(25))])

        with pytest.raises(InsufficientFundsError) as exc_info:
            await WalletRepository().debit(db, "alice", 40, "gift_sent", "gift", "g-1", None)

        assert exc_info.value.available == 25
        assert exc_info.value.required == 40
        # no ledger insert after a failed debit
        assert db.execute.await_count == 2

    async def test_guard_miss_with_missing_user(self, db: MagicMock) -> None:
        db.execute = AsyncMock(side_effect=[_result(None), _result(None)])

        with pytest.raises(UserNotFoundError):
            await WalletRepository().debit(db, "ghost", 1, "gift_sent", None, None, None)

    async def test_debit_sql_guards_balance(self) -> None:
        from src.sa_wallet.infrastructure import persistence

        sql = str(persistence._DEBIT_SQL)
        assert "coins >= :amount" in sql
        assert "RETURNING coins" in sql


class TestCredit:
    async def test_success_records_positive_ledger_row(self, db: MagicMock) -> None:
        db.execute = AsyncMock(
            side_effect=[_result(_coins_row(1450)), _result(_tx_row(1350, 1450, "withdraw"))]
        )

        tx = await WalletRepository().credit(
            db, "alice", 1350, "withdraw", "investment", "inv-1", None
        )

        assert tx.amount == 1350
        assert db.execute.await_args_list[1].args[1]["amount"] == 1350

    async def test_unknown_user(self, db: MagicMock) -> None:
        db.execute = AsyncMock(return_value=_result(None))

        with pytest.raises(UserNotFoundError):
            await WalletRepository().credit(db, "ghost", 5, "gift_received", None, None, None)


class TestGetBalance:
    async def test_returns_coins(self, db: MagicMock) -> None:
        db.execute = AsyncMock(return_value=_result(_coins_row(100)))
        assert await WalletRepository().get_balance(db, "alice") == 100

    async def test_missing_user_is_none(self, db: MagicMock) -> None:
        db.execute = AsyncMock(return_value=_result(None))
        assert await WalletRepository().get_balance(db, "ghost") is None


class TestLockUsers:
    async def test_locks_in_id_order_and_returns_existing(self, db: MagicMock) -> None:
        rows = [MagicMock(id="alice"), MagicMock(id="bob")]
        result = MagicMock()
        result.fetchall.return_value = rows
        db.execute = AsyncMock(return_value=result)

        locked = await WalletRepository().lock_users(db, ["bob", "alice", "bob"])

        assert locked == {"alice", "bob"}
        sql, params = db.execute.await_args.args
        assert params["user_ids"] == ["alice", "bob"]
        assert "ORDER BY id" in str(sql)
        assert "FOR UPDATE" in str(sql)
