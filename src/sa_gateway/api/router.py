"""Auth API router: register, login, refresh, me.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sa_common.database import get_db_session
from src.sa_common.response import ApiResponse, request_response
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel
from src.sa_gateway.user.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from src.sa_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User registration",
)
async def register(
    request: Request,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    async with db.begin():
        user = await _service.register(
            body.username, body.email, body.password, body.display_name, db
        )

    data = RegisterResponse(
        user_id=str(user.id),
        username=user.username,
        email=user.email,
        display_name=user.display_name,
        coins=user.coins,
        created_at=user.created_at.isoformat(),
    )
    return request_response(request, data.model_dump(), "User registered successfully")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User login",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    user, access_token, refresh_token = await _service.login(body.username, body.password, db)

    data = LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="Bearer",
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=UserInfo.from_model(user),
    )
    return request_response(request, data.model_dump(), "Login successful")


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Refresh access token",
)
async def refresh_token(
    request: Request,
    body: RefreshRequest,
) -> ApiResponse:
    new_access_token = await _service.refresh(body.refresh_token)

    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    return request_response(request, data.model_dump(), "Token refreshed")


@router.get("/me", response_model=ApiResponse, summary="Current user")
async def me(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> ApiResponse:
    return request_response(request, UserInfo.from_model(current_user).model_dump())
