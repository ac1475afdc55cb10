"""Repository Protocols — dependency inversion for testability.

Unit tests inject mocks that conform to these Protocols.
Infrastructure layer provides the real implementations.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_social.domain.models import Follow, FollowUser, Notification


class FollowRepositoryProtocol(Protocol):
    async def user_exists(self, db: AsyncSession, user_id: str) -> bool: ...

    async def create_follow(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> Follow | None: ...

    async def delete_follow(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> bool: ...

    async def is_following(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> bool: ...

    async def list_followers(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[FollowUser]: ...

    async def list_following(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[FollowUser]: ...


class NotificationRepositoryProtocol(Protocol):
    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        actor_id: str,
        notification_type: str,
        body: str | None,
        reference_id: str | None,
        reference_type: str | None,
    ) -> Notification: ...

    async def list_for_user(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[Notification]: ...

    async def count_unread(self, db: AsyncSession, user_id: str) -> int: ...

    async def mark_all_read(self, db: AsyncSession, user_id: str) -> int: ...

    async def mark_read(
        self, db: AsyncSession, user_id: str, notification_id: str
    ) -> bool: ...
