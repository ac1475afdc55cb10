"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.

debit/credit are the only way any module moves coins: each call applies one
atomic balance change AND appends the matching coin_transactions row.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_wallet.domain.models import CoinTransaction, Gift


class WalletRepositoryProtocol(Protocol):
    async def get_balance(self, db: AsyncSession, user_id: str) -> int | None: ...

    async def lock_users(self, db: AsyncSession, user_ids: list[str]) -> set[str]: ...

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        tx_type: str,
        ref_type: str | None,
        ref_id: str | None,
        description: str | None,
    ) -> CoinTransaction: ...

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        tx_type: str,
        ref_type: str | None,
        ref_id: str | None,
        description: str | None,
    ) -> CoinTransaction: ...

    async def create_gift(
        self,
        db: AsyncSession,
        gift_id: str,
        sender_id: str,
        receiver_id: str,
        amount: int,
        gift_type: str,
        post_id: str | None,
    ) -> Gift: ...

    async def post_exists(self, db: AsyncSession, post_id: str) -> bool: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        tx_type: str | None,
    ) -> list[CoinTransaction]: ...

    async def list_gifts(
        self,
        db: AsyncSession,
        user_id: str,
        direction: str,
        limit: int,
    ) -> list[Gift]: ...
