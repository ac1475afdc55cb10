"""sa_gaming REST API.

GET  /games                               — games by player count
POST /games                               — add a game
GET  /tournaments                         — tournaments, optional status filter
POST /tournaments                         — create a tournament
GET  /tournaments/{id}                    — detail with joined flag and countdown
POST /tournaments/{id}/join               — pay the fee and take a seat
POST /tournaments/{id}/leave              — give up the seat (no refund)
GET  /tournaments/{id}/leaderboard        — entries by score
PUT  /tournaments/{id}/score              — set the caller's own score
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.database import get_db_session
from src.sa_common.enums import TournamentStatus
from src.sa_common.response import ApiResponse, request_response
from src.sa_gaming.application.schemas import (
    CreateGameRequest,
    CreateTournamentRequest,
    UpdateScoreRequest,
)
from src.sa_gaming.application.service import GamingApplicationService
from src.sa_gateway.auth.dependencies import get_current_user
from src.sa_gateway.user.db_models import UserModel

router = APIRouter(tags=["gaming"])

_service = GamingApplicationService()


@router.get("/games")
async def list_games(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    category: str | None = Query(None, max_length=50),
) -> ApiResponse:
    items = await _service.list_games(db, category)
    return request_response(request, [i.model_dump() for i in items])


@router.post("/games", status_code=201)
async def create_game(
    body: CreateGameRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_game(
        db, body.title, body.description, body.cover_image, body.category, body.is_live
    )
    return request_response(request, data.model_dump())


@router.get("/tournaments")
async def list_tournaments(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: TournamentStatus | None = Query(None),
) -> ApiResponse:
    items = await _service.list_tournaments(db, status.value if status else None)
    return request_response(request, [i.model_dump() for i in items])


@router.post("/tournaments", status_code=201)
async def create_tournament(
    body: CreateTournamentRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_tournament(
        db,
        body.title,
        body.description,
        body.game_id,
        body.entry_fee,
        body.prize_pool,
        body.max_players,
        body.status.value,
        body.starts_at,
        body.ends_at,
    )
    return request_response(request, data.model_dump())


@router.get("/tournaments/{tournament_id}")
async def get_tournament(
    tournament_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_tournament(db, tournament_id, str(current_user.id))
    return request_response(request, data.model_dump())


@router.post("/tournaments/{tournament_id}/join")
async def join_tournament(
    tournament_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.join(db, str(current_user.id), tournament_id)
    return request_response(request, data.model_dump())


@router.post("/tournaments/{tournament_id}/leave")
async def leave_tournament(
    tournament_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.leave(db, str(current_user.id), tournament_id)
    return request_response(request, data.model_dump())


@router.get("/tournaments/{tournament_id}/leaderboard")
async def leaderboard(
    tournament_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.leaderboard(db, tournament_id)
    return request_response(request, [i.model_dump() for i in items])


@router.put("/tournaments/{tournament_id}/score")
async def update_score(
    tournament_id: str,
    body: UpdateScoreRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.update_score(db, str(current_user.id), tournament_id, body.score)
    return request_response(request, data.model_dump())
