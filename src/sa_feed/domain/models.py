"""Domain models for sa_feed — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Author:
    user_id: str
    username: str
    display_name: str
    avatar: str | None = None
    is_verified: bool = False


@dataclass
class Post:
    id: str
    user_id: str
    content: str
    image_url: str | None = None
    video_url: str | None = None
    audio_url: str | None = None
    coin_cost: int = 0
    likes: int = 0
    reposts: int = 0
    comments: int = 0
    created_at: datetime | None = None
    author: Author | None = None
    liked_by_me: bool = False


@dataclass
class Comment:
    id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime | None = None
    author: Author | None = None


@dataclass
class ToggleResult:
    """Outcome of a like toggle: the reaction state and counter after the change."""

    post_id: str
    liked: bool
    likes: int
