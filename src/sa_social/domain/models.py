"""Domain models for sa_social — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Follow:
    id: str
    follower_id: str
    following_id: str
    created_at: datetime | None = None


@dataclass
class FollowUser:
    """One side of a follow edge, joined with the user's display info."""

    user_id: str
    username: str
    display_name: str
    avatar: str | None
    is_verified: bool
    followed_at: datetime


@dataclass
class Notification:
    id: str
    user_id: str                     # recipient
    actor_id: str
    type: str                        # NotificationType value
    body: str | None = None
    reference_id: str | None = None
    reference_type: str | None = None
    is_read: bool = False
    created_at: datetime | None = None
    # Joined actor display info (list queries only)
    actor_username: str | None = None
    actor_display_name: str | None = None
    actor_avatar: str | None = None
