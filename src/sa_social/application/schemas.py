"""Pydantic response schemas for sa_social API."""

from pydantic import BaseModel

from src.sa_common.datetime_utils import iso_or_none
from src.sa_social.domain.models import FollowUser, Notification


class FollowResponse(BaseModel):
    follower_id: str
    following_id: str
    following: bool
    created: bool  # False when the edge already existed (follow) or was absent (unfollow)


class FollowStatusResponse(BaseModel):
    user_id: str
    following: bool


class FollowUserItem(BaseModel):
    user_id: str
    username: str
    display_name: str
    avatar: str | None
    is_verified: bool
    followed_at: str

    @classmethod
    def from_domain(cls, f: FollowUser) -> "FollowUserItem":
        return cls(
            user_id=f.user_id,
            username=f.username,
            display_name=f.display_name,
            avatar=f.avatar,
            is_verified=f.is_verified,
            followed_at=f.followed_at.isoformat(),
        )


class NotificationActor(BaseModel):
    user_id: str
    username: str | None
    display_name: str | None
    avatar: str | None


class NotificationItem(BaseModel):
    id: str
    type: str
    body: str | None
    reference_id: str | None
    reference_type: str | None
    is_read: bool
    created_at: str | None
    actor: NotificationActor

    @classmethod
    def from_domain(cls, n: Notification) -> "NotificationItem":
        return cls(
            id=n.id,
            type=n.type,
            body=n.body,
            reference_id=n.reference_id,
            reference_type=n.reference_type,
            is_read=n.is_read,
            created_at=iso_or_none(n.created_at),
            actor=NotificationActor(
                user_id=n.actor_id,
                username=n.actor_username,
                display_name=n.actor_display_name,
                avatar=n.actor_avatar,
            ),
        )


class NotificationListResponse(BaseModel):
    items: list[NotificationItem]
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkReadResponse(BaseModel):
    updated: int
