"""WalletApplicationService — gifts, balance and ledger history.

A gift is one database transaction: lock both users in id order, debit
sender, credit receiver, insert the gift row. Both ledger rows reference the
gift id, which is generated here so it exists before the gift row does.
The receiver's notification is sent only after that transaction commits.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sa_common.coins import validate_amount
from src.sa_common.datetime_utils import iso_or_none
from src.sa_common.enums import NotificationType, ReferenceType, TransactionType
from src.sa_common.errors import (
    PostNotFoundError,
    SelfTargetNotAllowedError,
    UserNotFoundError,
)
from src.sa_common.pagination import id_cursor_decode, id_cursor_encode
from src.sa_social.application.notifier import Notifier
from src.sa_wallet.application.schemas import (
    BalanceResponse,
    GiftItem,
    GiftResponse,
    TransactionItem,
    TransactionListResponse,
)
from src.sa_wallet.domain.repository import WalletRepositoryProtocol
from src.sa_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger("sa.wallet")

_GIFT_LIST_LIMIT = 50


class WalletApplicationService:
    def __init__(
        self,
        repo: WalletRepositoryProtocol | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._repo: WalletRepositoryProtocol = repo or WalletRepository()
        self._notifier = notifier or Notifier()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        coins = await self._repo.get_balance(db, user_id)
        if coins is None:
            raise UserNotFoundError(user_id)
        return BalanceResponse.of(user_id, coins)

    async def send_gift(
        self,
        db: AsyncSession,
        sender_id: str,
        receiver_id: str,
        amount: object,
        gift_type: str = "coins",
        post_id: str | None = None,
    ) -> GiftResponse:
        amount = validate_amount(amount)
        if sender_id == receiver_id:
            raise SelfTargetNotAllowedError()

        gift_id = str(uuid.uuid4())
        try:
            locked = await self._repo.lock_users(db, [sender_id, receiver_id])
            if receiver_id not in locked:
                raise UserNotFoundError(receiver_id)
            if post_id is not None and not await self._repo.post_exists(db, post_id):
                raise PostNotFoundError(post_id)
            sent = await self._repo.debit(
                db,
                sender_id,
                amount,
                TransactionType.GIFT_SENT.value,
                ReferenceType.GIFT.value,
                gift_id,
                f"Gift to {receiver_id}",
            )
            await self._repo.credit(
                db,
                receiver_id,
                amount,
                TransactionType.GIFT_RECEIVED.value,
                ReferenceType.GIFT.value,
                gift_id,
                f"Gift from {sender_id}",
            )
            gift = await self._repo.create_gift(
                db, gift_id, sender_id, receiver_id, amount, gift_type, post_id
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Gift %s: %s -> %s amount=%d balance_after=%d",
            gift.id, sender_id, receiver_id, amount, sent.balance_after,
        )
        await self._notifier.notify(
            db,
            recipient_id=receiver_id,
            actor_id=sender_id,
            notification_type=NotificationType.GIFT,
            body=f"sent you {amount} coins",
            reference_id=gift.id,
            reference_type=ReferenceType.GIFT.value,
        )
        return GiftResponse(
            gift_id=gift.id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            amount=amount,
            gift_type=gift.gift_type,
            post_id=gift.post_id,
            sender_balance=sent.balance_after,
            created_at=iso_or_none(gift.created_at),
        )

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        limit: int = 50,
        cursor: str | None = None,
        tx_type: str | None = None,
    ) -> TransactionListResponse:
        limit = max(1, min(limit, settings.TRANSACTIONS_PAGE_LIMIT))
        rows = await self._repo.list_transactions(
            db, user_id, id_cursor_decode(cursor), limit + 1, tx_type
        )
        has_more = len(rows) > limit
        page = rows[:limit]
        next_cursor = id_cursor_encode(page[-1].id) if has_more and page else None
        return TransactionListResponse(
            items=[TransactionItem.from_domain(t) for t in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def list_gifts(
        self, db: AsyncSession, user_id: str, direction: str = "received"
    ) -> list[GiftItem]:
        rows = await self._repo.list_gifts(db, user_id, direction, _GIFT_LIST_LIMIT)
        return [GiftItem.from_domain(g) for g in rows]
