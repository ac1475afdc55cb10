"""FollowRepository and NotificationRepository.

All queries use raw text() SQL. Duplicate follows are absorbed by the
uq_follows_pair constraint via ON CONFLICT DO NOTHING; a None return from
create_follow means the edge already existed.

Transaction ownership: the calling application service commits.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.errors import InternalError
from src.sa_social.domain.models import Follow, FollowUser, Notification

# ---------------------------------------------------------------------------
# SQL: follows
# ---------------------------------------------------------------------------

_USER_EXISTS_SQL = text("SELECT 1 FROM users WHERE id = :user_id")

_INSERT_FOLLOW_SQL = text("""
    INSERT INTO follows (follower_id, following_id)
    VALUES (:follower_id, :following_id)
    ON CONFLICT (follower_id, following_id) DO NOTHING
    RETURNING id, follower_id, following_id, created_at
""")

_DELETE_FOLLOW_SQL = text("""
    DELETE FROM follows
    WHERE follower_id = :follower_id AND following_id = :following_id
    RETURNING id
""")

_IS_FOLLOWING_SQL = text("""
    SELECT 1 FROM follows
    WHERE follower_id = :follower_id AND following_id = :following_id
""")

_LIST_FOLLOWERS_SQL = text("""
    SELECT u.id AS user_id, u.username, u.display_name, u.avatar, u.is_verified,
           f.created_at AS followed_at
    FROM follows f
    JOIN users u ON u.id = f.follower_id
    WHERE f.following_id = :user_id
    ORDER BY f.created_at DESC
    LIMIT :limit
""")

_LIST_FOLLOWING_SQL = text("""
    SELECT u.id AS user_id, u.username, u.display_name, u.avatar, u.is_verified,
           f.created_at AS followed_at
    FROM follows f
    JOIN users u ON u.id = f.following_id
    WHERE f.follower_id = :user_id
    ORDER BY f.created_at DESC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# SQL: notifications
# ---------------------------------------------------------------------------

_INSERT_NOTIFICATION_SQL = text("""
    INSERT INTO notifications
        (user_id, actor_id, type, body, reference_id, reference_type)
    VALUES
        (:user_id, :actor_id, :type, :body, :reference_id, :reference_type)
    RETURNING id, user_id, actor_id, type, body, reference_id, reference_type,
              is_read, created_at
""")

_LIST_NOTIFICATIONS_SQL = text("""
    SELECT n.id, n.user_id, n.actor_id, n.type, n.body,
           n.reference_id, n.reference_type, n.is_read, n.created_at,
           a.username AS actor_username,
           a.display_name AS actor_display_name,
           a.avatar AS actor_avatar
    FROM notifications n
    LEFT JOIN users a ON a.id = n.actor_id
    WHERE n.user_id = :user_id
    ORDER BY n.created_at DESC, n.id DESC
    LIMIT :limit
""")

_COUNT_UNREAD_SQL = text("""
    SELECT COUNT(*) AS unread
    FROM notifications
    WHERE user_id = :user_id AND is_read = FALSE
""")

_MARK_ALL_READ_SQL = text("""
    UPDATE notifications
    SET is_read = TRUE
    WHERE user_id = :user_id AND is_read = FALSE
""")

_MARK_ONE_READ_SQL = text("""
    UPDATE notifications
    SET is_read = TRUE
    WHERE id = :notification_id AND user_id = :user_id
    RETURNING id
""")


def _row_to_follow(row: object) -> Follow:
    return Follow(
        id=row.id,  # type: ignore[attr-defined]
        follower_id=row.follower_id,  # type: ignore[attr-defined]
        following_id=row.following_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_follow_user(row: object) -> FollowUser:
    return FollowUser(
        user_id=row.user_id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        display_name=row.display_name,  # type: ignore[attr-defined]
        avatar=row.avatar,  # type: ignore[attr-defined]
        is_verified=row.is_verified,  # type: ignore[attr-defined]
        followed_at=row.followed_at,  # type: ignore[attr-defined]
    )


def _row_to_notification(row: object) -> Notification:
    return Notification(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        actor_id=row.actor_id,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        body=row.body,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        is_read=row.is_read,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        actor_username=getattr(row, "actor_username", None),
        actor_display_name=getattr(row, "actor_display_name", None),
        actor_avatar=getattr(row, "actor_avatar", None),
    )


class FollowRepository:
    async def user_exists(self, db: AsyncSession, user_id: str) -> bool:
        result = await db.execute(_USER_EXISTS_SQL, {"user_id": user_id})
        return result.fetchone() is not None

    async def create_follow(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> Follow | None:
        result = await db.execute(
            _INSERT_FOLLOW_SQL,
            {"follower_id": follower_id, "following_id": following_id},
        )
        row = result.fetchone()
        return _row_to_follow(row) if row else None

    async def delete_follow(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> bool:
        result = await db.execute(
            _DELETE_FOLLOW_SQL,
            {"follower_id": follower_id, "following_id": following_id},
        )
        return result.fetchone() is not None

    async def is_following(
        self, db: AsyncSession, follower_id: str, following_id: str
    ) -> bool:
        result = await db.execute(
            _IS_FOLLOWING_SQL,
            {"follower_id": follower_id, "following_id": following_id},
        )
        return result.fetchone() is not None

    async def list_followers(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[FollowUser]:
        result = await db.execute(_LIST_FOLLOWERS_SQL, {"user_id": user_id, "limit": limit})
        return [_row_to_follow_user(row) for row in result.fetchall()]

    async def list_following(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[FollowUser]:
        result = await db.execute(_LIST_FOLLOWING_SQL, {"user_id": user_id, "limit": limit})
        return [_row_to_follow_user(row) for row in result.fetchall()]


class NotificationRepository:
    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        actor_id: str,
        notification_type: str,
        body: str | None,
        reference_id: str | None,
        reference_type: str | None,
    ) -> Notification:
        result = await db.execute(
            _INSERT_NOTIFICATION_SQL,
            {
                "user_id": user_id,
                "actor_id": actor_id,
                "type": notification_type,
                "body": body,
                "reference_id": reference_id,
                "reference_type": reference_type,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Notification insert returned no rows")
        return _row_to_notification(row)

    async def list_for_user(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[Notification]:
        result = await db.execute(_LIST_NOTIFICATIONS_SQL, {"user_id": user_id, "limit": limit})
        return [_row_to_notification(row) for row in result.fetchall()]

    async def count_unread(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(_COUNT_UNREAD_SQL, {"user_id": user_id})
        row = result.fetchone()
        return int(row.unread) if row else 0

    async def mark_all_read(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(_MARK_ALL_READ_SQL, {"user_id": user_id})
        return int(result.rowcount or 0)  # type: ignore[attr-defined]

    async def mark_read(
        self, db: AsyncSession, user_id: str, notification_id: str
    ) -> bool:
        result = await db.execute(
            _MARK_ONE_READ_SQL,
            {"user_id": user_id, "notification_id": notification_id},
        )
        return result.fetchone() is not None
