"""Pydantic request/response schemas for sa_messaging API."""

from pydantic import BaseModel, Field

from src.sa_common.datetime_utils import iso_or_none
from src.sa_messaging.domain.models import Conversation, Member, Message


class CreateConversationRequest(BaseModel):
    participant_ids: list[str] = Field(..., min_length=1, max_length=50)


class SendMessageRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class MemberItem(BaseModel):
    user_id: str
    username: str
    display_name: str
    avatar: str | None
    status: str | None

    @classmethod
    def from_domain(cls, m: Member) -> "MemberItem":
        return cls(
            user_id=m.user_id,
            username=m.username,
            display_name=m.display_name,
            avatar=m.avatar,
            status=m.status,
        )


class MessageItem(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    is_read: bool
    created_at: str | None

    @classmethod
    def from_domain(cls, m: Message) -> "MessageItem":
        return cls(
            id=m.id,
            conversation_id=m.conversation_id,
            sender_id=m.sender_id,
            content=m.content,
            is_read=m.is_read,
            created_at=iso_or_none(m.created_at),
        )


class ConversationItem(BaseModel):
    id: str
    created_at: str | None
    last_message_at: str | None
    members: list[MemberItem]
    last_message: MessageItem | None
    unread_count: int

    @classmethod
    def from_domain(cls, c: Conversation) -> "ConversationItem":
        return cls(
            id=c.id,
            created_at=iso_or_none(c.created_at),
            last_message_at=iso_or_none(c.last_message_at),
            members=[MemberItem.from_domain(m) for m in c.members],
            last_message=MessageItem.from_domain(c.last_message) if c.last_message else None,
            unread_count=c.unread_count,
        )


class ConversationCreatedResponse(BaseModel):
    conversation: ConversationItem
    created: bool


class MarkReadResponse(BaseModel):
    conversation_id: str
    updated: int


class UnreadMessagesResponse(BaseModel):
    unread_count: int
