"""sa_marketplace REST API — plugin catalogue."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.database import get_db_session
from src.sa_common.response import ApiResponse, request_response
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel
from src.sa_marketplace.application.schemas import CreatePluginRequest
from src.sa_marketplace.application.service import PluginService

router = APIRouter(prefix="/plugins", tags=["marketplace"])

_service = PluginService()


@router.get("")
async def list_plugins(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    category: str | None = Query(None, max_length=50),
) -> ApiResponse:
    items = await _service.list_plugins(db, category)
    return request_response(request, [i.model_dump() for i in items])


@router.get("/{plugin_id}")
async def get_plugin(
    plugin_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_plugin(db, plugin_id)
    return request_response(request, data.model_dump())


@router.post("", status_code=201)
async def create_plugin(
    body: CreatePluginRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_plugin(
        db,
        str(current_user.id),
        current_user.display_name,
        body.name,
        body.description,
        body.icon,
        body.category,
        body.price,
        body.nodes,
    )
    return request_response(request, data.model_dump())
