"""Assistant chat endpoints: GET /chat (history), POST /chat (ask)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_assistant.application.schemas import ChatRequest
from src.sa_assistant.application.service import AssistantService
from src.sa_common.database import get_db_session
from src.sa_common.response import ApiResponse, request_response
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel

router = APIRouter(prefix="/chat", tags=["assistant"])

_service = AssistantService()


@router.get("")
async def chat_history(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.history(db, str(current_user.id))
    return request_response(request, [i.model_dump() for i in items])


@router.post("")
async def send_chat(
    body: ChatRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.send(db, str(current_user.id), body.content)
    return request_response(request, data.model_dump())
