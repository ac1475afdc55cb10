"""SocialApplicationService and NotificationApplicationService.

Follow/unfollow commit the edge change first and only then hand off to the
Notifier, so notification delivery can never undo a follow.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.enums import NotificationType, ReferenceType
from src.sa_common.errors import NotificationNotFoundError, SelfFollowError, UserNotFoundError
from src.sa_social.application.notifier import Notifier
from src.sa_social.application.schemas import (
    FollowResponse,
    FollowStatusResponse,
    FollowUserItem,
    MarkReadResponse,
    NotificationItem,
    NotificationListResponse,
    UnreadCountResponse,
)
from src.sa_social.domain.repository import (
    FollowRepositoryProtocol,
    NotificationRepositoryProtocol,
)
from src.sa_social.infrastructure.persistence import FollowRepository, NotificationRepository

logger = logging.getLogger("sa.social")

_FOLLOW_LIST_LIMIT = 100
_NOTIFICATION_LIST_LIMIT = 50


class SocialApplicationService:
    def __init__(
        self,
        repo: FollowRepositoryProtocol | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._repo: FollowRepositoryProtocol = repo or FollowRepository()
        self._notifier = notifier or Notifier()

    async def follow(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> FollowResponse:
        if follower_id == following_id:
            raise SelfFollowError()
        try:
            if not await self._repo.user_exists(db, following_id):
                raise UserNotFoundError(following_id)
            edge = await self._repo.create_follow(db, follower_id, following_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        if edge is None:
            # Second follow of the same user: no new edge, no new notification
            return FollowResponse(
                follower_id=follower_id,
                following_id=following_id,
                following=True,
                created=False,
            )

        logger.info("Follow %s -> %s", follower_id, following_id)
        await self._notifier.notify(
            db,
            recipient_id=following_id,
            actor_id=follower_id,
            notification_type=NotificationType.FOLLOW,
            body="started following you",
            reference_id=follower_id,
            reference_type=ReferenceType.USER.value,
        )
        return FollowResponse(
            follower_id=follower_id,
            following_id=following_id,
            following=True,
            created=True,
        )

    async def unfollow(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> FollowResponse:
        try:
            removed = await self._repo.delete_follow(db, follower_id, following_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if removed:
            logger.info("Unfollow %s -> %s", follower_id, following_id)
        return FollowResponse(
            follower_id=follower_id,
            following_id=following_id,
            following=False,
            created=removed,
        )

    async def follow_status(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> FollowStatusResponse:
        following = await self._repo.is_following(db, follower_id, following_id)
        return FollowStatusResponse(user_id=following_id, following=following)

    async def list_followers(self, db: AsyncSession, user_id: str) -> list[FollowUserItem]:
        if not await self._repo.user_exists(db, user_id):
            raise UserNotFoundError(user_id)
        rows = await self._repo.list_followers(db, user_id, _FOLLOW_LIST_LIMIT)
        return [FollowUserItem.from_domain(r) for r in rows]

    async def list_following(self, db: AsyncSession, user_id: str) -> list[FollowUserItem]:
        if not await self._repo.user_exists(db, user_id):
            raise UserNotFoundError(user_id)
        rows = await self._repo.list_following(db, user_id, _FOLLOW_LIST_LIMIT)
        return [FollowUserItem.from_domain(r) for r in rows]


class NotificationApplicationService:
    def __init__(self, repo: NotificationRepositoryProtocol | None = None) -> None:
        self._repo: NotificationRepositoryProtocol = repo or NotificationRepository()

    async def list_notifications(
        self, db: AsyncSession, user_id: str
    ) -> NotificationListResponse:
        rows = await self._repo.list_for_user(db, user_id, _NOTIFICATION_LIST_LIMIT)
        unread = await self._repo.count_unread(db, user_id)
        return NotificationListResponse(
            items=[NotificationItem.from_domain(n) for n in rows],
            unread_count=unread,
        )

    async def unread_count(self, db: AsyncSession, user_id: str) -> UnreadCountResponse:
        return UnreadCountResponse(unread_count=await self._repo.count_unread(db, user_id))

    async def mark_all_read(self, db: AsyncSession, user_id: str) -> MarkReadResponse:
        try:
            updated = await self._repo.mark_all_read(db, user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return MarkReadResponse(updated=updated)

    async def mark_read(
        self, db: AsyncSession, user_id: str, notification_id: str
    ) -> MarkReadResponse:
        try:
            found = await self._repo.mark_read(db, user_id, notification_id)
            if not found:
                raise NotificationNotFoundError(notification_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return MarkReadResponse(updated=1)
