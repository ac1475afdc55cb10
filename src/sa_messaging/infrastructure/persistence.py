"""MessagingRepository — conversations, membership and messages in raw SQL.

A conversation is identified by its exact member set. Lookup groups the
membership rows per conversation and requires both the total count and the
count of requested members to equal the requested set size. Creation takes a
transaction-scoped advisory lock on the sorted member set so two concurrent
requests for the same set cannot both create a conversation.

Transaction ownership: the calling application service commits.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.errors import InternalError
from src.sa_messaging.domain.models import Conversation, Member, Message

# ---------------------------------------------------------------------------
# SQL: conversations
# ---------------------------------------------------------------------------

_COUNT_USERS_SQL = text("""
    SELECT COUNT(*) AS n FROM users WHERE id = ANY(CAST(:user_ids AS TEXT[]))
""")

_LOCK_MEMBER_SET_SQL = text("""
    SELECT pg_advisory_xact_lock(hashtext(:member_key))
""")

_FIND_BY_MEMBERS_SQL = text("""
    SELECT conversation_id
    FROM conversation_members
    GROUP BY conversation_id
    HAVING COUNT(*) = :n
       AND COUNT(*) FILTER (WHERE user_id = ANY(CAST(:user_ids AS TEXT[]))) = :n
    LIMIT 1
""")

_INSERT_CONVERSATION_SQL = text("""
    INSERT INTO conversations DEFAULT VALUES
    RETURNING id, created_at, last_message_at
""")

_INSERT_MEMBERS_SQL = text("""
    INSERT INTO conversation_members (conversation_id, user_id)
    SELECT :conversation_id, unnest(CAST(:user_ids AS TEXT[]))
""")

_GET_CONVERSATION_SQL = text("""
    SELECT id, created_at, last_message_at FROM conversations WHERE id = :conversation_id
""")

_IS_MEMBER_SQL = text("""
    SELECT 1 FROM conversation_members
    WHERE conversation_id = :conversation_id AND user_id = :user_id
""")

_LIST_MEMBERS_SQL = text("""
    SELECT cm.conversation_id, u.id AS user_id, u.username, u.display_name,
           u.avatar, u.status
    FROM conversation_members cm
    JOIN users u ON u.id = cm.user_id
    WHERE cm.conversation_id = ANY(CAST(:conversation_ids AS TEXT[]))
    ORDER BY cm.joined_at ASC, u.username ASC
""")

_LIST_CONVERSATIONS_SQL = text("""
    SELECT c.id, c.created_at, c.last_message_at,
           lm.id AS lm_id, lm.sender_id AS lm_sender_id, lm.content AS lm_content,
           lm.is_read AS lm_is_read, lm.created_at AS lm_created_at,
           (
               SELECT COUNT(*) FROM messages m
               WHERE m.conversation_id = c.id
                 AND m.sender_id <> :user_id
                 AND NOT m.is_read
           ) AS unread_count
    FROM conversations c
    JOIN conversation_members me
      ON me.conversation_id = c.id AND me.user_id = :user_id
    LEFT JOIN LATERAL (
        SELECT id, sender_id, content, is_read, created_at
        FROM messages
        WHERE conversation_id = c.id
        ORDER BY created_at DESC, id DESC
        LIMIT 1
    ) lm ON TRUE
    ORDER BY COALESCE(c.last_message_at, c.created_at) DESC, c.id DESC
    LIMIT :limit
""")

_TOUCH_CONVERSATION_SQL = text("""
    UPDATE conversations SET last_message_at = NOW() WHERE id = :conversation_id
""")

# ---------------------------------------------------------------------------
# SQL: messages
# ---------------------------------------------------------------------------

_INSERT_MESSAGE_SQL = text("""
    INSERT INTO messages (conversation_id, sender_id, content)
    VALUES (:conversation_id, :sender_id, :content)
    RETURNING id, conversation_id, sender_id, content, is_read, created_at
""")

_LIST_MESSAGES_SQL = text("""
    SELECT id, conversation_id, sender_id, content, is_read, created_at
    FROM (
        SELECT id, conversation_id, sender_id, content, is_read, created_at
        FROM messages
        WHERE conversation_id = :conversation_id
        ORDER BY created_at DESC, id DESC
        LIMIT :limit
    ) recent
    ORDER BY created_at ASC, id ASC
""")

_MARK_READ_SQL = text("""
    UPDATE messages SET is_read = TRUE
    WHERE conversation_id = :conversation_id
      AND sender_id <> :reader_id
      AND NOT is_read
""")

_UNREAD_COUNT_SQL = text("""
    SELECT COUNT(*) AS n
    FROM messages m
    JOIN conversation_members cm
      ON cm.conversation_id = m.conversation_id AND cm.user_id = :user_id
    WHERE m.sender_id <> :user_id AND NOT m.is_read
""")


def _row_to_message(row: object) -> Message:
    return Message(
        id=row.id,  # type: ignore[attr-defined]
        conversation_id=row.conversation_id,  # type: ignore[attr-defined]
        sender_id=row.sender_id,  # type: ignore[attr-defined]
        content=row.content,  # type: ignore[attr-defined]
        is_read=row.is_read,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_conversation(row: object) -> Conversation:
    return Conversation(
        id=row.id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        last_message_at=row.last_message_at,  # type: ignore[attr-defined]
    )


class MessagingRepository:
    async def count_existing_users(self, db: AsyncSession, user_ids: list[str]) -> int:
        result = await db.execute(_COUNT_USERS_SQL, {"user_ids": user_ids})
        return int(result.scalar_one())

    async def find_conversation_by_members(
        self, db: AsyncSession, member_ids: list[str]
    ) -> str | None:
        await db.execute(_LOCK_MEMBER_SET_SQL, {"member_key": ",".join(sorted(member_ids))})
        result = await db.execute(
            _FIND_BY_MEMBERS_SQL, {"user_ids": member_ids, "n": len(member_ids)}
        )
        row = result.fetchone()
        return row.conversation_id if row else None

    async def create_conversation(
        self, db: AsyncSession, member_ids: list[str]
    ) -> Conversation:
        result = await db.execute(_INSERT_CONVERSATION_SQL)
        row = result.fetchone()
        if row is None:
            raise InternalError("Conversation insert returned no rows — this should never happen")
        conversation = _row_to_conversation(row)
        await db.execute(
            _INSERT_MEMBERS_SQL,
            {"conversation_id": conversation.id, "user_ids": member_ids},
        )
        return conversation

    async def get_conversation(
        self, db: AsyncSession, conversation_id: str
    ) -> Conversation | None:
        result = await db.execute(_GET_CONVERSATION_SQL, {"conversation_id": conversation_id})
        row = result.fetchone()
        return _row_to_conversation(row) if row else None

    async def is_member(
        self, db: AsyncSession, conversation_id: str, user_id: str
    ) -> bool:
        result = await db.execute(
            _IS_MEMBER_SQL, {"conversation_id": conversation_id, "user_id": user_id}
        )
        return result.fetchone() is not None

    async def list_members(
        self, db: AsyncSession, conversation_ids: list[str]
    ) -> dict[str, list[Member]]:
        members: dict[str, list[Member]] = {cid: [] for cid in conversation_ids}
        if not conversation_ids:
            return members
        result = await db.execute(_LIST_MEMBERS_SQL, {"conversation_ids": conversation_ids})
        for row in result.fetchall():
            members.setdefault(row.conversation_id, []).append(
                Member(
                    user_id=row.user_id,
                    username=row.username,
                    display_name=row.display_name,
                    avatar=row.avatar,
                    status=row.status,
                )
            )
        return members

    async def list_conversations(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[Conversation]:
        result = await db.execute(_LIST_CONVERSATIONS_SQL, {"user_id": user_id, "limit": limit})
        conversations = []
        for row in result.fetchall():
            conversation = _row_to_conversation(row)
            conversation.unread_count = int(row.unread_count)
            if row.lm_id is not None:
                conversation.last_message = Message(
                    id=row.lm_id,
                    conversation_id=row.id,
                    sender_id=row.lm_sender_id,
                    content=row.lm_content,
                    is_read=row.lm_is_read,
                    created_at=row.lm_created_at,
                )
            conversations.append(conversation)
        return conversations

    async def insert_message(
        self, db: AsyncSession, conversation_id: str, sender_id: str, content: str
    ) -> Message:
        result = await db.execute(
            _INSERT_MESSAGE_SQL,
            {"conversation_id": conversation_id, "sender_id": sender_id, "content": content},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Message insert returned no rows — this should never happen")
        return _row_to_message(row)

    async def touch_conversation(self, db: AsyncSession, conversation_id: str) -> None:
        await db.execute(_TOUCH_CONVERSATION_SQL, {"conversation_id": conversation_id})

    async def list_messages(
        self, db: AsyncSession, conversation_id: str, limit: int
    ) -> list[Message]:
        result = await db.execute(
            _LIST_MESSAGES_SQL, {"conversation_id": conversation_id, "limit": limit}
        )
        return [_row_to_message(row) for row in result.fetchall()]

    async def mark_read(
        self, db: AsyncSession, conversation_id: str, reader_id: str
    ) -> int:
        result = await db.execute(
            _MARK_READ_SQL, {"conversation_id": conversation_id, "reader_id": reader_id}
        )
        return int(result.rowcount or 0)  # type: ignore[attr-defined]

    async def unread_count(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(_UNREAD_COUNT_SQL, {"user_id": user_id})
        return int(result.scalar_one())
