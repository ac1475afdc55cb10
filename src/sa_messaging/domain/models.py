"""Domain models for sa_messaging — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Member:
    user_id: str
    username: str
    display_name: str
    avatar: str | None = None
    status: str | None = None


@dataclass
class Message:
    id: str
    conversation_id: str
    sender_id: str
    content: str
    is_read: bool = False
    created_at: datetime | None = None


@dataclass
class Conversation:
    id: str
    created_at: datetime | None = None
    last_message_at: datetime | None = None
    members: list[Member] = field(default_factory=list)
    last_message: Message | None = None
    unread_count: int = 0
