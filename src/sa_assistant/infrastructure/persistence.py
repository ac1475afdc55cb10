"""ChatRepository — per-user assistant chat history."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_assistant.domain.responder import ChatMessage
from src.sa_common.errors import InternalError

_INSERT_SQL = text("""
    INSERT INTO chat_messages (user_id, role, content)
    VALUES (:user_id, :role, :content)
    RETURNING id, user_id, role, content, created_at
""")

# Most recent :limit messages, returned oldest first
_HISTORY_SQL = text("""
    SELECT id, user_id, role, content, created_at
    FROM (
        SELECT id, user_id, role, content, created_at
        FROM chat_messages
        WHERE user_id = :user_id
        ORDER BY created_at DESC, id DESC
        LIMIT :limit
    ) recent
    ORDER BY created_at ASC, id ASC
""")


def _row_to_message(row: object) -> ChatMessage:
    return ChatMessage(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        role=row.role,  # type: ignore[attr-defined]
        content=row.content,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class ChatRepository:
    async def add(
        self, db: AsyncSession, user_id: str, role: str, content: str
    ) -> ChatMessage:
        result = await db.execute(
            _INSERT_SQL, {"user_id": user_id, "role": role, "content": content}
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Chat insert returned no rows — this should never happen")
        return _row_to_message(row)

    async def history(self, db: AsyncSession, user_id: str, limit: int) -> list[ChatMessage]:
        result = await db.execute(_HISTORY_SQL, {"user_id": user_id, "limit": limit})
        return [_row_to_message(row) for row in result.fetchall()]
