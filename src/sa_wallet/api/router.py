"""sa_wallet REST API.

POST /gifts          — send coins to another user
GET  /gifts          — gifts received (default) or sent by the caller
GET  /transactions   — caller's ledger lines, newest first
GET  /wallet         — caller's current balance
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.database import get_db_session
from src.sa_common.enums import TransactionType
from src.sa_common.response import ApiResponse, request_response
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel
from src.sa_wallet.application.schemas import GiftRequest
from src.sa_wallet.application.service import WalletApplicationService

router = APIRouter(tags=["wallet"])

_service = WalletApplicationService()


@router.post("/gifts", status_code=201)
async def send_gift(
    body: GiftRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.send_gift(
        db,
        str(current_user.id),
        body.receiver_id,
        body.amount,
        body.gift_type,
        body.post_id,
    )
    return request_response(request, data.model_dump())


@router.get("/gifts")
async def list_gifts(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    direction: Literal["received", "sent"] = Query("received"),
) -> ApiResponse:
    items = await _service.list_gifts(db, str(current_user.id), direction)
    return request_response(request, [i.model_dump() for i in items])


@router.get("/transactions")
async def list_transactions(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(50, ge=1, le=50),
    cursor: str | None = Query(None),
    type: TransactionType | None = Query(None),
) -> ApiResponse:
    data = await _service.list_transactions(
        db,
        str(current_user.id),
        limit=limit,
        cursor=cursor,
        tx_type=type.value if type else None,
    )
    return request_response(request, data.model_dump())


@router.get("/wallet")
async def get_balance(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_balance(db, str(current_user.id))
    return request_response(request, data.model_dump())
