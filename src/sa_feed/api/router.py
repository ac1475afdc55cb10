"""sa_feed REST API.

GET  /posts                     — feed, newest first (scope=all|following)
POST /posts                     — create a post
GET  /posts/{post_id}           — single post with liked_by_me
POST /posts/{post_id}/like      — toggle the caller's like
GET  /posts/{post_id}/comments  — comments, oldest first
POST /posts/{post_id}/comments  — add a comment
POST /posts/{post_id}/unlock    — unlock a paid post
GET  /users/{user_id}/posts     — one author's posts
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.database import get_db_session
from src.sa_common.response import ApiResponse, request_response
from src.sa_feed.application.schemas import CreateCommentRequest, CreatePostRequest
from src.sa_feed.application.service import FeedApplicationService
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel

router = APIRouter(tags=["feed"])

_service = FeedApplicationService()


@router.get("/posts")
async def list_posts(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    scope: Literal["all", "following"] = Query("all"),
    cursor: str | None = Query(None),
    limit: int = Query(20, ge=1, le=50),
) -> ApiResponse:
    data = await _service.list_posts(
        db,
        str(current_user.id),
        following_only=scope == "following",
        cursor=cursor,
        limit=limit,
    )
    return request_response(request, data.model_dump())


@router.post("/posts", status_code=201)
async def create_post(
    body: CreatePostRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_post(
        db,
        str(current_user.id),
        body.content,
        body.image_url,
        body.video_url,
        body.audio_url,
        body.coin_cost,
    )
    return request_response(request, data.model_dump())


@router.get("/posts/{post_id}")
async def get_post(
    post_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_post(db, post_id, str(current_user.id))
    return request_response(request, data.model_dump())


@router.post("/posts/{post_id}/like")
async def toggle_like(
    post_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.toggle_like(db, str(current_user.id), post_id)
    return request_response(request, data.model_dump())


@router.get("/posts/{post_id}/comments")
async def list_comments(
    post_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.list_comments(db, post_id)
    return request_response(request, [i.model_dump() for i in items])


@router.post("/posts/{post_id}/comments", status_code=201)
async def add_comment(
    post_id: str,
    body: CreateCommentRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.add_comment(db, str(current_user.id), post_id, body.content)
    return request_response(request, data.model_dump())


@router.post("/posts/{post_id}/unlock")
async def unlock_post(
    post_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.unlock(db, str(current_user.id), post_id)
    return request_response(request, data.model_dump())


@router.get("/users/{user_id}/posts")
async def list_user_posts(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    cursor: str | None = Query(None),
    limit: int = Query(20, ge=1, le=50),
) -> ApiResponse:
    data = await _service.list_posts(
        db, str(current_user.id), author_id=user_id, cursor=cursor, limit=limit
    )
    return request_response(request, data.model_dump())
