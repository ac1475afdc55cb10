"""Repository Protocol for posts, comments and reactions.

The likes and comments counters on a post are only ever changed by the same
repository call that inserts or deletes the row they count.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_feed.domain.models import Comment, Post


class FeedRepositoryProtocol(Protocol):
    async def list_posts(
        self,
        db: AsyncSession,
        viewer_id: str,
        following_only: bool,
        author_id: str | None,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Post]: ...

    async def get_post(
        self, db: AsyncSession, post_id: str, viewer_id: str | None = None
    ) -> Post | None: ...

    async def get_post_for_update(self, db: AsyncSession, post_id: str) -> Post | None: ...

    async def create_post(
        self,
        db: AsyncSession,
        user_id: str,
        content: str,
        image_url: str | None,
        video_url: str | None,
        audio_url: str | None,
        coin_cost: int,
    ) -> Post: ...

    async def delete_like(self, db: AsyncSession, user_id: str, post_id: str) -> bool: ...

    async def insert_like(self, db: AsyncSession, user_id: str, post_id: str) -> bool: ...

    async def adjust_likes(self, db: AsyncSession, post_id: str, delta: int) -> int: ...

    async def create_comment(
        self, db: AsyncSession, post_id: str, user_id: str, content: str
    ) -> Comment: ...

    async def increment_comments(self, db: AsyncSession, post_id: str) -> int: ...

    async def list_comments(
        self, db: AsyncSession, post_id: str, limit: int
    ) -> list[Comment]: ...
