"""Pydantic request/response schemas for sa_gaming API."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from src.sa_common.datetime_utils import iso_or_none, seconds_until
from src.sa_common.enums import TournamentStatus
from src.sa_gaming.domain.models import Game, Tournament, TournamentEntry


class CreateGameRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    cover_image: str | None = Field(default=None, max_length=2048)
    category: str = Field(default="action", min_length=1, max_length=50)
    is_live: bool = False


class CreateTournamentRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    game_id: str | None = Field(default=None, max_length=64)
    entry_fee: int = Field(default=0, ge=0, strict=True)
    prize_pool: int = Field(default=0, ge=0, strict=True)
    max_players: int = Field(default=100, gt=0, strict=True)
    status: TournamentStatus = TournamentStatus.UPCOMING
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    @model_validator(mode="after")
    def ends_after_start(self) -> "CreateTournamentRequest":
        if self.starts_at and self.ends_at and self.ends_at <= self.starts_at:
            raise ValueError("ends_at must be after starts_at")
        return self


class UpdateScoreRequest(BaseModel):
    score: int = Field(..., ge=0, strict=True)


class GameItem(BaseModel):
    id: str
    title: str
    description: str | None
    cover_image: str | None
    category: str
    players: int
    rating: int
    is_live: bool

    @classmethod
    def from_domain(cls, g: Game) -> "GameItem":
        return cls(
            id=g.id,
            title=g.title,
            description=g.description,
            cover_image=g.cover_image,
            category=g.category,
            players=g.players,
            rating=g.rating,
            is_live=g.is_live,
        )


def _seconds_remaining(t: Tournament, now: datetime | None) -> int | None:
    """Countdown shown to clients: to the start while upcoming, to the end while active."""
    if t.status == TournamentStatus.UPCOMING.value:
        return seconds_until(t.starts_at, now)
    if t.status == TournamentStatus.ACTIVE.value:
        return seconds_until(t.ends_at, now)
    return 0


class TournamentItem(BaseModel):
    id: str
    game_id: str | None
    title: str
    description: str | None
    entry_fee: int
    prize_pool: int
    max_players: int
    current_players: int
    status: str
    starts_at: str | None
    ends_at: str | None
    seconds_remaining: int | None
    joined: bool = False

    @classmethod
    def from_domain(
        cls, t: Tournament, joined: bool = False, now: datetime | None = None
    ) -> "TournamentItem":
        return cls(
            id=t.id,
            game_id=t.game_id,
            title=t.title,
            description=t.description,
            entry_fee=t.entry_fee,
            prize_pool=t.prize_pool,
            max_players=t.max_players,
            current_players=t.current_players,
            status=t.status,
            starts_at=iso_or_none(t.starts_at),
            ends_at=iso_or_none(t.ends_at),
            seconds_remaining=_seconds_remaining(t, now),
            joined=joined,
        )


class EntryItem(BaseModel):
    rank: int
    user_id: str
    username: str | None
    display_name: str | None
    avatar: str | None
    score: int
    joined_at: str | None

    @classmethod
    def from_domain(cls, e: TournamentEntry, rank: int) -> "EntryItem":
        return cls(
            rank=rank,
            user_id=e.user_id,
            username=e.username,
            display_name=e.display_name,
            avatar=e.avatar,
            score=e.score,
            joined_at=iso_or_none(e.joined_at),
        )


class JoinResponse(BaseModel):
    tournament: TournamentItem
    entry_fee_paid: int
    balance_after: int | None  # None when the tournament is free


class LeaveResponse(BaseModel):
    tournament: TournamentItem
    refunded: int = 0


class ScoreResponse(BaseModel):
    tournament_id: str
    user_id: str
    score: int
