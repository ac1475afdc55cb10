"""Pydantic request/response schemas for the assistant chat."""

from pydantic import BaseModel, Field

from src.sa_assistant.domain.responder import ChatMessage
from src.sa_common.datetime_utils import iso_or_none


class ChatRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=4000)


class ChatMessageItem(BaseModel):
    id: str
    role: str
    content: str
    created_at: str | None

    @classmethod
    def from_domain(cls, m: ChatMessage) -> "ChatMessageItem":
        return cls(
            id=m.id,
            role=m.role,
            content=m.content,
            created_at=iso_or_none(m.created_at),
        )


class ChatExchangeResponse(BaseModel):
    user_message: ChatMessageItem
    ai_message: ChatMessageItem
