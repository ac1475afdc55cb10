"""Pydantic request/response schemas for sa_feed API."""

from pydantic import BaseModel, Field

from src.sa_common.datetime_utils import iso_or_none
from src.sa_feed.domain.models import Author, Comment, Post


class CreatePostRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    image_url: str | None = Field(default=None, max_length=2048)
    video_url: str | None = Field(default=None, max_length=2048)
    audio_url: str | None = Field(default=None, max_length=2048)
    coin_cost: int = Field(default=0, ge=0, strict=True)


class CreateCommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class AuthorInfo(BaseModel):
    user_id: str
    username: str
    display_name: str
    avatar: str | None
    is_verified: bool

    @classmethod
    def from_domain(cls, a: Author) -> "AuthorInfo":
        return cls(
            user_id=a.user_id,
            username=a.username,
            display_name=a.display_name,
            avatar=a.avatar,
            is_verified=a.is_verified,
        )


class PostItem(BaseModel):
    id: str
    user_id: str
    content: str
    image_url: str | None
    video_url: str | None
    audio_url: str | None
    coin_cost: int
    likes: int
    reposts: int
    comments: int
    liked_by_me: bool
    created_at: str | None
    author: AuthorInfo | None

    @classmethod
    def from_domain(cls, p: Post) -> "PostItem":
        return cls(
            id=p.id,
            user_id=p.user_id,
            content=p.content,
            image_url=p.image_url,
            video_url=p.video_url,
            audio_url=p.audio_url,
            coin_cost=p.coin_cost,
            likes=p.likes,
            reposts=p.reposts,
            comments=p.comments,
            liked_by_me=p.liked_by_me,
            created_at=iso_or_none(p.created_at),
            author=AuthorInfo.from_domain(p.author) if p.author else None,
        )


class PostListResponse(BaseModel):
    items: list[PostItem]
    next_cursor: str | None
    has_more: bool


class CommentItem(BaseModel):
    id: str
    post_id: str
    user_id: str
    content: str
    created_at: str | None
    author: AuthorInfo | None

    @classmethod
    def from_domain(cls, c: Comment) -> "CommentItem":
        return cls(
            id=c.id,
            post_id=c.post_id,
            user_id=c.user_id,
            content=c.content,
            created_at=iso_or_none(c.created_at),
            author=AuthorInfo.from_domain(c.author) if c.author else None,
        )


class CommentCreatedResponse(BaseModel):
    comment: CommentItem
    comments: int  # post counter after the insert


class LikeToggleResponse(BaseModel):
    post_id: str
    liked: bool
    likes: int


class UnlockResponse(BaseModel):
    success: bool
    post_id: str
    coin_cost: int
