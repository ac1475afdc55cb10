"""Notifier — best-effort notification fan-out.

Called by the wallet, feed, social and gaming services AFTER their primary
transaction has committed. The notification gets its own short transaction;
a database failure here is logged and swallowed so the like/follow/gift that
caused it stands.

Self-notifications (actor == recipient) are skipped unless the caller passes
allow_self=True (tournament join confirmations).
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.enums import NotificationType
from src.sa_social.domain.models import Notification
from src.sa_social.domain.repository import NotificationRepositoryProtocol
from src.sa_social.infrastructure.persistence import NotificationRepository

logger = logging.getLogger("sa.social.notifier")


class Notifier:
    def __init__(self, repo: NotificationRepositoryProtocol | None = None) -> None:
        self._repo: NotificationRepositoryProtocol = repo or NotificationRepository()

    async def notify(
        self,
        db: AsyncSession,
        *,
        recipient_id: str,
        actor_id: str,
        notification_type: NotificationType,
        body: str | None = None,
        reference_id: str | None = None,
        reference_type: str | None = None,
        allow_self: bool = False,
    ) -> Notification | None:
        """Create one notification. Returns None when skipped or when it failed."""
        if recipient_id == actor_id and not allow_self:
            return None
        try:
            notification = await self._repo.create(
                db,
                recipient_id,
                actor_id,
                notification_type.value,
                body,
                reference_id,
                reference_type,
            )
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.warning(
                "Dropped %s notification for %s (actor=%s ref=%s)",
                notification_type.value,
                recipient_id,
                actor_id,
                reference_id,
                exc_info=True,
            )
            return None
        return notification
