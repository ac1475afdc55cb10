"""FeedApplicationService — posts, like toggle, comments, unlock.

ToggleReaction runs as one transaction: lock the post row, then either
delete the caller's like and decrement, or insert it and increment. The
counter therefore moves by exactly one per call and a second call undoes
the first. Like and comment notifications go out after commit and never to
the post's own author.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sa_common.enums import NotificationType, ReferenceType
from src.sa_common.errors import PostNotFoundError
from src.sa_common.pagination import ts_cursor_decode, ts_cursor_encode
from src.sa_feed.application.schemas import (
    CommentCreatedResponse,
    CommentItem,
    LikeToggleResponse,
    PostItem,
    PostListResponse,
    UnlockResponse,
)
from src.sa_feed.domain.models import ToggleResult
from src.sa_feed.domain.repository import FeedRepositoryProtocol
from src.sa_feed.infrastructure.persistence import FeedRepository
from src.sa_social.application.notifier import Notifier

logger = logging.getLogger("sa.feed")

_FEED_PAGE_LIMIT = 50
_COMMENT_LIST_LIMIT = 200


def comment_preview(content: str, limit: int | None = None) -> str:
    """First `limit` characters of a comment, with an ellipsis when truncated."""
    limit = settings.COMMENT_PREVIEW_CHARS if limit is None else limit
    if len(content) <= limit:
        return content
    return content[:limit] + "..."


class FeedApplicationService:
    def __init__(
        self,
        repo: FeedRepositoryProtocol | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._repo: FeedRepositoryProtocol = repo or FeedRepository()
        self._notifier = notifier or Notifier()

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    async def list_posts(
        self,
        db: AsyncSession,
        viewer_id: str,
        following_only: bool = False,
        author_id: str | None = None,
        cursor: str | None = None,
        limit: int = 20,
    ) -> PostListResponse:
        limit = max(1, min(limit, _FEED_PAGE_LIMIT))
        cursor_ts, cursor_id = ts_cursor_decode(cursor)
        rows = await self._repo.list_posts(
            db, viewer_id, following_only, author_id, cursor_ts, cursor_id, limit + 1
        )
        has_more = len(rows) > limit
        page = rows[:limit]
        next_cursor = None
        if has_more and page and page[-1].created_at is not None:
            next_cursor = ts_cursor_encode(page[-1].created_at, page[-1].id)
        return PostListResponse(
            items=[PostItem.from_domain(p) for p in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def get_post(self, db: AsyncSession, post_id: str, viewer_id: str) -> PostItem:
        post = await self._repo.get_post(db, post_id, viewer_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return PostItem.from_domain(post)

    async def create_post(
        self,
        db: AsyncSession,
        user_id: str,
        content: str,
        image_url: str | None = None,
        video_url: str | None = None,
        audio_url: str | None = None,
        coin_cost: int = 0,
    ) -> PostItem:
        try:
            post = await self._repo.create_post(
                db, user_id, content, image_url, video_url, audio_url, coin_cost
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Post %s created by %s", post.id, user_id)
        return PostItem.from_domain(post)

    # ------------------------------------------------------------------
    # Reactions
    # ------------------------------------------------------------------

    async def toggle_like(
        self, db: AsyncSession, user_id: str, post_id: str
    ) -> LikeToggleResponse:
        inserted = False
        try:
            post = await self._repo.get_post_for_update(db, post_id)
            if post is None:
                raise PostNotFoundError(post_id)
            if await self._repo.delete_like(db, user_id, post_id):
                likes = await self._repo.adjust_likes(db, post_id, -1)
                outcome = ToggleResult(post_id=post_id, liked=False, likes=likes)
            elif await self._repo.insert_like(db, user_id, post_id):
                likes = await self._repo.adjust_likes(db, post_id, 1)
                inserted = True
                outcome = ToggleResult(post_id=post_id, liked=True, likes=likes)
            else:
                # Row lock makes this unreachable unless the constraint and the
                # delete disagree; report the state as it stands.
                outcome = ToggleResult(post_id=post_id, liked=True, likes=post.likes)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        if inserted:
            await self._notifier.notify(
                db,
                recipient_id=post.user_id,
                actor_id=user_id,
                notification_type=NotificationType.LIKE,
                body="liked your post",
                reference_id=post_id,
                reference_type=ReferenceType.POST.value,
            )
        return LikeToggleResponse(post_id=post_id, liked=outcome.liked, likes=outcome.likes)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def list_comments(self, db: AsyncSession, post_id: str) -> list[CommentItem]:
        if await self._repo.get_post(db, post_id) is None:
            raise PostNotFoundError(post_id)
        rows = await self._repo.list_comments(db, post_id, _COMMENT_LIST_LIMIT)
        return [CommentItem.from_domain(c) for c in rows]

    async def add_comment(
        self, db: AsyncSession, user_id: str, post_id: str, content: str
    ) -> CommentCreatedResponse:
        try:
            post = await self._repo.get_post_for_update(db, post_id)
            if post is None:
                raise PostNotFoundError(post_id)
            comment = await self._repo.create_comment(db, post_id, user_id, content)
            count = await self._repo.increment_comments(db, post_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await self._notifier.notify(
            db,
            recipient_id=post.user_id,
            actor_id=user_id,
            notification_type=NotificationType.COMMENT,
            body=comment_preview(content),
            reference_id=post_id,
            reference_type=ReferenceType.POST.value,
        )
        return CommentCreatedResponse(comment=CommentItem.from_domain(comment), comments=count)

    # ------------------------------------------------------------------
    # Paid posts
    # ------------------------------------------------------------------

    async def unlock(self, db: AsyncSession, user_id: str, post_id: str) -> UnlockResponse:
        post = await self._repo.get_post(db, post_id, user_id)
        if post is None:
            raise PostNotFoundError(post_id)
        logger.info("Post %s unlocked by %s (coin_cost=%d)", post_id, user_id, post.coin_cost)
        return UnlockResponse(success=True, post_id=post_id, coin_cost=post.coin_cost)
