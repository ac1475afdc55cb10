"""MessagingApplicationService — conversations, messages, read tracking.

Only members of a conversation may read it, post to it or mark it read; a
non-member gets the same 404 as a missing conversation.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.errors import ConversationNotFoundError, InvalidParticipantsError
from src.sa_messaging.application.schemas import (
    ConversationCreatedResponse,
    ConversationItem,
    MarkReadResponse,
    MessageItem,
    UnreadMessagesResponse,
)
from src.sa_messaging.domain.repository import MessagingRepositoryProtocol
from src.sa_messaging.infrastructure.persistence import MessagingRepository

logger = logging.getLogger("sa.messaging")

_CONVERSATION_LIST_LIMIT = 50
_MESSAGE_LIST_LIMIT = 200


def member_set(caller_id: str, participant_ids: list[str]) -> list[str]:
    """Caller plus participants, deduplicated, in a stable order."""
    return sorted({caller_id, *participant_ids})


class MessagingApplicationService:
    def __init__(self, repo: MessagingRepositoryProtocol | None = None) -> None:
        self._repo: MessagingRepositoryProtocol = repo or MessagingRepository()

    async def get_or_create_conversation(
        self, db: AsyncSession, caller_id: str, participant_ids: list[str]
    ) -> ConversationCreatedResponse:
        members = member_set(caller_id, participant_ids)
        if len(members) < 2:
            raise InvalidParticipantsError("a conversation needs at least one other user")
        try:
            if await self._repo.count_existing_users(db, members) != len(members):
                raise InvalidParticipantsError("unknown user in participant list")
            existing_id = await self._repo.find_conversation_by_members(db, members)
            if existing_id is not None:
                conversation = await self._repo.get_conversation(db, existing_id)
                created = False
            else:
                conversation = await self._repo.create_conversation(db, members)
                created = True
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if conversation is None:
            raise ConversationNotFoundError(str(existing_id))

        if created:
            logger.info("Conversation %s created for %s", conversation.id, members)
        conversation.members = (await self._repo.list_members(db, [conversation.id]))[
            conversation.id
        ]
        return ConversationCreatedResponse(
            conversation=ConversationItem.from_domain(conversation),
            created=created,
        )

    async def list_conversations(
        self, db: AsyncSession, user_id: str
    ) -> list[ConversationItem]:
        conversations = await self._repo.list_conversations(
            db, user_id, _CONVERSATION_LIST_LIMIT
        )
        members = await self._repo.list_members(db, [c.id for c in conversations])
        for c in conversations:
            c.members = members.get(c.id, [])
        return [ConversationItem.from_domain(c) for c in conversations]

    async def list_messages(
        self, db: AsyncSession, user_id: str, conversation_id: str
    ) -> list[MessageItem]:
        await self._require_member(db, conversation_id, user_id)
        rows = await self._repo.list_messages(db, conversation_id, _MESSAGE_LIST_LIMIT)
        return [MessageItem.from_domain(m) for m in rows]

    async def send_message(
        self, db: AsyncSession, sender_id: str, conversation_id: str, content: str
    ) -> MessageItem:
        try:
            await self._require_member(db, conversation_id, sender_id)
            message = await self._repo.insert_message(db, conversation_id, sender_id, content)
            await self._repo.touch_conversation(db, conversation_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return MessageItem.from_domain(message)

    async def mark_read(
        self, db: AsyncSession, reader_id: str, conversation_id: str
    ) -> MarkReadResponse:
        try:
            await self._require_member(db, conversation_id, reader_id)
            updated = await self._repo.mark_read(db, conversation_id, reader_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return MarkReadResponse(conversation_id=conversation_id, updated=updated)

    async def unread_count(self, db: AsyncSession, user_id: str) -> UnreadMessagesResponse:
        return UnreadMessagesResponse(unread_count=await self._repo.unread_count(db, user_id))

    async def _require_member(
        self, db: AsyncSession, conversation_id: str, user_id: str
    ) -> None:
        if not await self._repo.is_member(db, conversation_id, user_id):
            raise ConversationNotFoundError(conversation_id)
