"""sa_social follow endpoints.

POST   /follow/{user_id}          — follow (no-op if already following)
DELETE /follow/{user_id}          — unfollow (idempotent)
GET    /follow/{user_id}          — does the caller follow user_id?
GET    /users/{user_id}/followers
GET    /users/{user_id}/following
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.database import get_db_session
from src.sa_common.response import ApiResponse, request_response
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel
from src.sa_social.application.service import SocialApplicationService

router = APIRouter(tags=["social"])

_service = SocialApplicationService()


@router.post("/follow/{user_id}")
async def follow(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.follow(db, str(current_user.id), user_id)
    return request_response(request, data.model_dump())


@router.delete("/follow/{user_id}")
async def unfollow(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.unfollow(db, str(current_user.id), user_id)
    return request_response(request, data.model_dump())


@router.get("/follow/{user_id}")
async def follow_status(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.follow_status(db, str(current_user.id), user_id)
    return request_response(request, data.model_dump())


@router.get("/users/{user_id}/followers")
async def list_followers(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.list_followers(db, user_id)
    return request_response(request, [i.model_dump() for i in items])


@router.get("/users/{user_id}/following")
async def list_following(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.list_following(db, user_id)
    return request_response(request, [i.model_dump() for i in items])
