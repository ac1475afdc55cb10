"""FeedRepository — posts, comments and like reactions in raw SQL.

Counter changes (likes, comments) are single UPDATE ... RETURNING statements
issued in the same transaction as the reaction/comment row change. The like
toggle additionally locks the post row first, so concurrent toggles on one
post are serialized.

Transaction ownership: the calling application service commits.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.enums import ReactionType
from src.sa_common.errors import InternalError, PostNotFoundError
from src.sa_feed.domain.models import Author, Comment, Post

# ---------------------------------------------------------------------------
# SQL: posts
# ---------------------------------------------------------------------------

_POST_COLUMNS = """
    p.id, p.user_id, p.content, p.image_url, p.video_url, p.audio_url,
    p.coin_cost, p.likes, p.reposts, p.comments, p.created_at,
    u.username AS author_username, u.display_name AS author_display_name,
    u.avatar AS author_avatar, u.is_verified AS author_is_verified
"""

_LIST_POSTS_SQL = text(f"""
    SELECT {_POST_COLUMNS},
           EXISTS (
               SELECT 1 FROM reactions r
               WHERE r.post_id = p.id AND r.user_id = :viewer_id AND r.type = :like
           ) AS liked_by_me
    FROM posts p
    JOIN users u ON u.id = p.user_id
    WHERE (CAST(:author_id AS TEXT) IS NULL OR p.user_id = CAST(:author_id AS TEXT))
      AND (
          NOT CAST(:following_only AS BOOLEAN)
          OR p.user_id = :viewer_id
          OR p.user_id IN (
              SELECT following_id FROM follows WHERE follower_id = :viewer_id
          )
      )
      AND (
          CAST(:cursor_ts AS TIMESTAMPTZ) IS NULL
          OR (p.created_at, p.id) < (CAST(:cursor_ts AS TIMESTAMPTZ), CAST(:cursor_id AS TEXT))
      )
    ORDER BY p.created_at DESC, p.id DESC
    LIMIT :limit
""")

_GET_POST_SQL = text(f"""
    SELECT {_POST_COLUMNS},
           EXISTS (
               SELECT 1 FROM reactions r
               WHERE r.post_id = p.id AND r.user_id = :viewer_id AND r.type = :like
           ) AS liked_by_me
    FROM posts p
    JOIN users u ON u.id = p.user_id
    WHERE p.id = :post_id
""")

_GET_POST_FOR_UPDATE_SQL = text("""
    SELECT id, user_id, content, image_url, video_url, audio_url,
           coin_cost, likes, reposts, comments, created_at
    FROM posts
    WHERE id = :post_id
    FOR UPDATE
""")

_INSERT_POST_SQL = text("""
    INSERT INTO posts (user_id, content, image_url, video_url, audio_url, coin_cost)
    VALUES (:user_id, :content, :image_url, :video_url, :audio_url, :coin_cost)
    RETURNING id, user_id, content, image_url, video_url, audio_url,
              coin_cost, likes, reposts, comments, created_at
""")

# ---------------------------------------------------------------------------
# SQL: reactions + counters
# ---------------------------------------------------------------------------

_DELETE_LIKE_SQL = text("""
    DELETE FROM reactions
    WHERE user_id = :user_id AND post_id = :post_id AND type = :like
    RETURNING id
""")

_INSERT_LIKE_SQL = text("""
    INSERT INTO reactions (user_id, post_id, type)
    VALUES (:user_id, :post_id, :like)
    ON CONFLICT (user_id, post_id, type) DO NOTHING
    RETURNING id
""")

_ADJUST_LIKES_SQL = text("""
    UPDATE posts SET likes = likes + :delta
    WHERE id = :post_id
    RETURNING likes
""")

_INCREMENT_COMMENTS_SQL = text("""
    UPDATE posts SET comments = comments + 1
    WHERE id = :post_id
    RETURNING comments
""")

# ---------------------------------------------------------------------------
# SQL: comments
# ---------------------------------------------------------------------------

_INSERT_COMMENT_SQL = text("""
    INSERT INTO comments (post_id, user_id, content)
    VALUES (:post_id, :user_id, :content)
    RETURNING id, post_id, user_id, content, created_at
""")

_LIST_COMMENTS_SQL = text("""
    SELECT c.id, c.post_id, c.user_id, c.content, c.created_at,
           u.username AS author_username, u.display_name AS author_display_name,
           u.avatar AS author_avatar, u.is_verified AS author_is_verified
    FROM comments c
    JOIN users u ON u.id = c.user_id
    WHERE c.post_id = :post_id
    ORDER BY c.created_at ASC, c.id ASC
    LIMIT :limit
""")


def _row_to_author(row: object) -> Author:
    return Author(
        user_id=row.user_id,  # type: ignore[attr-defined]
        username=row.author_username,  # type: ignore[attr-defined]
        display_name=row.author_display_name,  # type: ignore[attr-defined]
        avatar=row.author_avatar,  # type: ignore[attr-defined]
        is_verified=row.author_is_verified,  # type: ignore[attr-defined]
    )


def _row_to_post(row: object, with_author: bool = True) -> Post:
    post = Post(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        content=row.content,  # type: ignore[attr-defined]
        image_url=row.image_url,  # type: ignore[attr-defined]
        video_url=row.video_url,  # type: ignore[attr-defined]
        audio_url=row.audio_url,  # type: ignore[attr-defined]
        coin_cost=row.coin_cost,  # type: ignore[attr-defined]
        likes=row.likes,  # type: ignore[attr-defined]
        reposts=row.reposts,  # type: ignore[attr-defined]
        comments=row.comments,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )
    if with_author:
        post.author = _row_to_author(row)
        post.liked_by_me = bool(row.liked_by_me)  # type: ignore[attr-defined]
    return post


def _row_to_comment(row: object, with_author: bool = True) -> Comment:
    return Comment(
        id=row.id,  # type: ignore[attr-defined]
        post_id=row.post_id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        content=row.content,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        author=_row_to_author(row) if with_author else None,
    )


class FeedRepository:
    async def list_posts(
        self,
        db: AsyncSession,
        viewer_id: str,
        following_only: bool,
        author_id: str | None,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Post]:
        result = await db.execute(
            _LIST_POSTS_SQL,
            {
                "viewer_id": viewer_id,
                "like": ReactionType.LIKE.value,
                "author_id": author_id,
                "following_only": following_only,
                "cursor_ts": cursor_ts,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_post(row) for row in result.fetchall()]

    async def get_post(
        self, db: AsyncSession, post_id: str, viewer_id: str | None = None
    ) -> Post | None:
        result = await db.execute(
            _GET_POST_SQL,
            {"post_id": post_id, "viewer_id": viewer_id or "", "like": ReactionType.LIKE.value},
        )
        row = result.fetchone()
        return _row_to_post(row) if row else None

    async def get_post_for_update(self, db: AsyncSession, post_id: str) -> Post | None:
        result = await db.execute(_GET_POST_FOR_UPDATE_SQL, {"post_id": post_id})
        row = result.fetchone()
        return _row_to_post(row, with_author=False) if row else None

    async def create_post(
        self,
        db: AsyncSession,
        user_id: str,
        content: str,
        image_url: str | None,
        video_url: str | None,
        audio_url: str | None,
        coin_cost: int,
    ) -> Post:
        result = await db.execute(
            _INSERT_POST_SQL,
            {
                "user_id": user_id,
                "content": content,
                "image_url": image_url,
                "video_url": video_url,
                "audio_url": audio_url,
                "coin_cost": coin_cost,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Post insert returned no rows — this should never happen")
        return _row_to_post(row, with_author=False)

    async def delete_like(self, db: AsyncSession, user_id: str, post_id: str) -> bool:
        result = await db.execute(
            _DELETE_LIKE_SQL,
            {"user_id": user_id, "post_id": post_id, "like": ReactionType.LIKE.value},
        )
        return result.fetchone() is not None

    async def insert_like(self, db: AsyncSession, user_id: str, post_id: str) -> bool:
        result = await db.execute(
            _INSERT_LIKE_SQL,
            {"user_id": user_id, "post_id": post_id, "like": ReactionType.LIKE.value},
        )
        return result.fetchone() is not None

    async def adjust_likes(self, db: AsyncSession, post_id: str, delta: int) -> int:
        result = await db.execute(_ADJUST_LIKES_SQL, {"post_id": post_id, "delta": delta})
        row = result.fetchone()
        if row is None:
            raise PostNotFoundError(post_id)
        return row.likes

    async def create_comment(
        self, db: AsyncSession, post_id: str, user_id: str, content: str
    ) -> Comment:
        result = await db.execute(
            _INSERT_COMMENT_SQL,
            {"post_id": post_id, "user_id": user_id, "content": content},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Comment insert returned no rows — this should never happen")
        return _row_to_comment(row, with_author=False)

    async def increment_comments(self, db: AsyncSession, post_id: str) -> int:
        result = await db.execute(_INCREMENT_COMMENTS_SQL, {"post_id": post_id})
        row = result.fetchone()
        if row is None:
            raise PostNotFoundError(post_id)
        return row.comments

    async def list_comments(
        self, db: AsyncSession, post_id: str, limit: int
    ) -> list[Comment]:
        result = await db.execute(_LIST_COMMENTS_SQL, {"post_id": post_id, "limit": limit})
        return [_row_to_comment(row) for row in result.fetchall()]
