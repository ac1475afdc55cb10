"""Repository Protocol for games, tournaments and tournament entries.

current_players and prize_pool are only changed by add_player/remove_player,
which the service calls in the same transaction as the entry insert/delete
and after locking the tournament row.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_gaming.domain.models import Game, Tournament, TournamentEntry


class GamingRepositoryProtocol(Protocol):
    async def list_games(
        self, db: AsyncSession, category: str | None, limit: int
    ) -> list[Game]: ...

    async def get_game(self, db: AsyncSession, game_id: str) -> Game | None: ...

    async def create_game(
        self,
        db: AsyncSession,
        title: str,
        description: str | None,
        cover_image: str | None,
        category: str,
        is_live: bool,
    ) -> Game: ...

    async def list_tournaments(
        self, db: AsyncSession, status: str | None, limit: int
    ) -> list[Tournament]: ...

    async def get_tournament(
        self, db: AsyncSession, tournament_id: str, for_update: bool = False
    ) -> Tournament | None: ...

    async def create_tournament(
        self,
        db: AsyncSession,
        game_id: str | None,
        title: str,
        description: str | None,
        entry_fee: int,
        prize_pool: int,
        max_players: int,
        status: str,
        starts_at: datetime | None,
        ends_at: datetime | None,
    ) -> Tournament: ...

    async def has_entry(
        self, db: AsyncSession, tournament_id: str, user_id: str
    ) -> bool: ...

    async def add_player(
        self, db: AsyncSession, tournament_id: str, fee: int
    ) -> Tournament: ...

    async def remove_player(self, db: AsyncSession, tournament_id: str) -> Tournament: ...

    async def insert_entry(
        self, db: AsyncSession, tournament_id: str, user_id: str
    ) -> TournamentEntry: ...

    async def delete_entry(
        self, db: AsyncSession, tournament_id: str, user_id: str
    ) -> bool: ...

    async def set_score(
        self, db: AsyncSession, tournament_id: str, user_id: str, score: int
    ) -> TournamentEntry | None: ...

    async def leaderboard(
        self, db: AsyncSession, tournament_id: str, limit: int
    ) -> list[TournamentEntry]: ...
