"""AssistantService — stores the prompt and the canned reply together."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_assistant.application.schemas import ChatExchangeResponse, ChatMessageItem
from src.sa_assistant.domain.responder import reply_for
from src.sa_assistant.infrastructure.persistence import ChatRepository
from src.sa_common.enums import ChatRole

_HISTORY_LIMIT = 200


class AssistantService:
    def __init__(self, repo: ChatRepository | None = None) -> None:
        self._repo = repo or ChatRepository()

    async def history(self, db: AsyncSession, user_id: str) -> list[ChatMessageItem]:
        rows = await self._repo.history(db, user_id, _HISTORY_LIMIT)
        return [ChatMessageItem.from_domain(m) for m in rows]

    async def send(self, db: AsyncSession, user_id: str, content: str) -> ChatExchangeResponse:
        try:
            user_msg = await self._repo.add(db, user_id, ChatRole.USER.value, content)
            ai_msg = await self._repo.add(
                db, user_id, ChatRole.ASSISTANT.value, reply_for(content)
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ChatExchangeResponse(
            user_message=ChatMessageItem.from_domain(user_msg),
            ai_message=ChatMessageItem.from_domain(ai_msg),
        )
