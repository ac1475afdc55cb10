"""sa_messaging REST API.

GET  /conversations                        — caller's conversations, most recent first
POST /conversations                        — get or create by exact member set
GET  /conversations/{id}/messages          — messages, oldest first
POST /conversations/{id}/messages          — send a message
POST /conversations/{id}/read              — mark others' messages read
GET  /messages/unread-count                — unread messages across all conversations
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.database import get_db_session
from src.sa_common.response import ApiResponse, request_response
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel
from src.sa_messaging.application.schemas import CreateConversationRequest, SendMessageRequest
from src.sa_messaging.application.service import MessagingApplicationService

router = APIRouter(tags=["messaging"])

_service = MessagingApplicationService()


@router.get("/conversations")
async def list_conversations(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.list_conversations(db, str(current_user.id))
    return request_response(request, [i.model_dump() for i in items])


@router.post("/conversations")
async def get_or_create_conversation(
    body: CreateConversationRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_or_create_conversation(
        db, str(current_user.id), body.participant_ids
    )
    return request_response(request, data.model_dump())


@router.get("/conversations/{conversation_id}/messages")
async def list_messages(
    conversation_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.list_messages(db, str(current_user.id), conversation_id)
    return request_response(request, [i.model_dump() for i in items])


@router.post("/conversations/{conversation_id}/messages", status_code=201)
async def send_message(
    conversation_id: str,
    body: SendMessageRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.send_message(db, str(current_user.id), conversation_id, body.content)
    return request_response(request, data.model_dump())


@router.post("/conversations/{conversation_id}/read")
async def mark_read(
    conversation_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.mark_read(db, str(current_user.id), conversation_id)
    return request_response(request, data.model_dump())


@router.get("/messages/unread-count")
async def unread_count(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.unread_count(db, str(current_user.id))
    return request_response(request, data.model_dump())
