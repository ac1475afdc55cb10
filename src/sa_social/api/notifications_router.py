"""Notification endpoints — all scoped to the authenticated recipient."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.database import get_db_session
from src.sa_common.response import ApiResponse, request_response
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel
from src.sa_social.application.service import NotificationApplicationService

router = APIRouter(prefix="/notifications", tags=["notifications"])

_service = NotificationApplicationService()


@router.get("")
async def list_notifications(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.list_notifications(db, str(current_user.id))
    return request_response(request, data.model_dump())


@router.get("/count")
async def unread_count(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.unread_count(db, str(current_user.id))
    return request_response(request, data.model_dump())


@router.post("/read")
async def mark_all_read(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.mark_all_read(db, str(current_user.id))
    return request_response(request, data.model_dump())


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.mark_read(db, str(current_user.id), notification_id)
    return request_response(request, data.model_dump())
