"""sa_invest REST API.

GET  /investments                   — caller's investments, newest first
POST /investments                   — fund a new investment
GET  /investments/summary           — active stake, current value, return %
GET  /investments/{id}              — one of the caller's investments
POST /investments/{id}/withdraw     — settle principal + return
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.database import get_db_session
from src.sa_common.enums import InvestmentStatus
from src.sa_common.response import ApiResponse, request_response
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel
from src.sa_invest.application.schemas import CreateInvestmentRequest
from src.sa_invest.application.service import InvestmentApplicationService

router = APIRouter(prefix="/investments", tags=["investments"])

_service = InvestmentApplicationService()


@router.get("")
async def list_investments(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: InvestmentStatus | None = Query(None),
) -> ApiResponse:
    items = await _service.list_investments(
        db, str(current_user.id), status.value if status else None
    )
    return request_response(request, [i.model_dump() for i in items])


@router.post("", status_code=201)
async def create_investment(
    body: CreateInvestmentRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_investment(
        db,
        str(current_user.id),
        body.target_type.value,
        body.target_id,
        body.target_name,
        body.amount,
    )
    return request_response(request, data.model_dump())


@router.get("/summary")
async def portfolio_summary(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.summary(db, str(current_user.id))
    return request_response(request, data.model_dump())


@router.get("/{investment_id}")
async def get_investment(
    investment_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_investment(db, str(current_user.id), investment_id)
    return request_response(request, data.model_dump())


@router.post("/{investment_id}/withdraw")
async def withdraw(
    investment_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.withdraw(db, str(current_user.id), investment_id)
    return request_response(request, data.model_dump())
