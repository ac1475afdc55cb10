"""Repository Protocol for conversations and messages."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_messaging.domain.models import Conversation, Member, Message


class MessagingRepositoryProtocol(Protocol):
    async def count_existing_users(self, db: AsyncSession, user_ids: list[str]) -> int: ...

    async def find_conversation_by_members(
        self, db: AsyncSession, member_ids: list[str]
    ) -> str | None: ...

    async def create_conversation(
        self, db: AsyncSession, member_ids: list[str]
    ) -> Conversation: ...

    async def get_conversation(
        self, db: AsyncSession, conversation_id: str
    ) -> Conversation | None: ...

    async def is_member(
        self, db: AsyncSession, conversation_id: str, user_id: str
    ) -> bool: ...

    async def list_members(
        self, db: AsyncSession, conversation_ids: list[str]
    ) -> dict[str, list[Member]]: ...

    async def list_conversations(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[Conversation]: ...

    async def insert_message(
        self, db: AsyncSession, conversation_id: str, sender_id: str, content: str
    ) -> Message: ...

    async def touch_conversation(self, db: AsyncSession, conversation_id: str) -> None: ...

    async def list_messages(
        self, db: AsyncSession, conversation_id: str, limit: int
    ) -> list[Message]: ...

    async def mark_read(
        self, db: AsyncSession, conversation_id: str, reader_id: str
    ) -> int: ...

    async def unread_count(self, db: AsyncSession, user_id: str) -> int: ...
