"""User profile endpoints.

GET  /users/top          — top 10 by rating
GET  /users/{user_id}    — profile + follow counts + is_following
PUT  /users/profile      — edit display_name / bio / avatar
PUT  /users/status       — online | away | offline
GET  /search/users?q=    — case-insensitive username/display name search
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.database import get_db_session
from src.sa_common.response import ApiResponse, request_response
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel
from src.sa_gateway.user.schemas import UpdateProfileRequest, UpdateStatusRequest
from src.sa_gateway.user.service import ProfileService

router = APIRouter(tags=["users"])

_service = ProfileService()


@router.get("/users/top")
async def top_users(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    users = await _service.top_users(db)
    return request_response(request, [u.model_dump() for u in users])


@router.put("/users/profile")
async def update_profile(
    body: UpdateProfileRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await _service.update_profile(
        db, str(current_user.id), body.display_name, body.bio, body.avatar
    )
    return request_response(request, user.model_dump(), "Profile updated")


@router.put("/users/status")
async def update_status(
    body: UpdateStatusRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await _service.update_status(db, str(current_user.id), body.status.value)
    return request_response(request, user.model_dump(), "Status updated")


@router.get("/users/{user_id}")
async def get_profile(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    profile = await _service.get_profile(db, user_id, str(current_user.id))
    return request_response(request, profile.model_dump())


@router.get("/search/users")
async def search_users(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    q: str = Query("", max_length=64, description="Username or display name fragment"),
) -> ApiResponse:
    users = await _service.search_users(db, q)
    return request_response(request, [u.model_dump() for u in users])
