"""GamingApplicationService — games, tournaments, join/leave, leaderboard.

Join runs as one transaction with the tournament row locked:
  1. AlreadyJoined if the caller has an entry
  2. TournamentFull if current_players >= max_players
  3. debit the entry fee (InsufficientFunds if short), ledger row
     `tournament_entry`
  4. prize_pool += fee, current_players += 1
  5. insert the entry
After commit the joining user gets a `tournament` notification addressed to
themselves as a confirmation.

Leave deletes the entry and decrements current_players. There is no refund
and the prize pool keeps the fee.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.datetime_utils import utc_now
from src.sa_common.enums import NotificationType, ReferenceType, TransactionType
from src.sa_common.errors import (
    AlreadyJoinedError,
    GameNotFoundError,
    NotJoinedError,
    TournamentFullError,
    TournamentNotFoundError,
)
from src.sa_gaming.application.schemas import (
    EntryItem,
    GameItem,
    JoinResponse,
    LeaveResponse,
    ScoreResponse,
    TournamentItem,
)
from src.sa_gaming.domain.repository import GamingRepositoryProtocol
from src.sa_gaming.infrastructure.persistence import GamingRepository
from src.sa_social.application.notifier import Notifier
from src.sa_wallet.domain.repository import WalletRepositoryProtocol
from src.sa_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger("sa.gaming")

_GAME_LIST_LIMIT = 100
_TOURNAMENT_LIST_LIMIT = 100
_LEADERBOARD_LIMIT = 100


class GamingApplicationService:
    def __init__(
        self,
        repo: GamingRepositoryProtocol | None = None,
        wallet: WalletRepositoryProtocol | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._repo: GamingRepositoryProtocol = repo or GamingRepository()
        self._wallet: WalletRepositoryProtocol = wallet or WalletRepository()
        self._notifier = notifier or Notifier()

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------

    async def list_games(
        self, db: AsyncSession, category: str | None = None
    ) -> list[GameItem]:
        rows = await self._repo.list_games(db, category, _GAME_LIST_LIMIT)
        return [GameItem.from_domain(g) for g in rows]

    async def create_game(
        self,
        db: AsyncSession,
        title: str,
        description: str | None,
        cover_image: str | None,
        category: str,
        is_live: bool,
    ) -> GameItem:
        try:
            game = await self._repo.create_game(
                db, title, description, cover_image, category, is_live
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return GameItem.from_domain(game)

    # ------------------------------------------------------------------
    # Tournaments
    # ------------------------------------------------------------------

    async def list_tournaments(
        self, db: AsyncSession, status: str | None = None
    ) -> list[TournamentItem]:
        rows = await self._repo.list_tournaments(db, status, _TOURNAMENT_LIST_LIMIT)
        now = utc_now()
        return [TournamentItem.from_domain(t, now=now) for t in rows]

    async def get_tournament(
        self, db: AsyncSession, tournament_id: str, viewer_id: str
    ) -> TournamentItem:
        tournament = await self._repo.get_tournament(db, tournament_id)
        if tournament is None:
            raise TournamentNotFoundError(tournament_id)
        joined = await self._repo.has_entry(db, tournament_id, viewer_id)
        return TournamentItem.from_domain(tournament, joined=joined)

    async def create_tournament(
        self,
        db: AsyncSession,
        title: str,
        description: str | None,
        game_id: str | None,
        entry_fee: int,
        prize_pool: int,
        max_players: int,
        status: str,
        starts_at: datetime | None,
        ends_at: datetime | None,
    ) -> TournamentItem:
        try:
            if game_id is not None and await self._repo.get_game(db, game_id) is None:
                raise GameNotFoundError(game_id)
            tournament = await self._repo.create_tournament(
                db,
                game_id,
                title,
                description,
                entry_fee,
                prize_pool,
                max_players,
                status,
                starts_at,
                ends_at,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Tournament %s created (fee=%d max=%d)", tournament.id, entry_fee, max_players)
        return TournamentItem.from_domain(tournament)

    async def join(
        self, db: AsyncSession, user_id: str, tournament_id: str
    ) -> JoinResponse:
        balance_after: int | None = None
        try:
            tournament = await self._repo.get_tournament(db, tournament_id, for_update=True)
            if tournament is None:
                raise TournamentNotFoundError(tournament_id)
            if await self._repo.has_entry(db, tournament_id, user_id):
                raise AlreadyJoinedError()
            if tournament.is_full:
                raise TournamentFullError()
            fee = tournament.entry_fee
            if fee > 0:
                tx = await self._wallet.debit(
                    db,
                    user_id,
                    fee,
                    TransactionType.TOURNAMENT_ENTRY.value,
                    ReferenceType.TOURNAMENT.value,
                    tournament_id,
                    f"Entry fee: {tournament.title}",
                )
                balance_after = tx.balance_after
            tournament = await self._repo.add_player(db, tournament_id, fee)
            await self._repo.insert_entry(db, tournament_id, user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Tournament %s joined by %s fee=%d players=%d/%d pool=%d",
            tournament_id, user_id, fee, tournament.current_players,
            tournament.max_players, tournament.prize_pool,
        )
        await self._notifier.notify(
            db,
            recipient_id=user_id,
            actor_id=user_id,
            notification_type=NotificationType.TOURNAMENT,
            body=f"You joined {tournament.title}",
            reference_id=tournament_id,
            reference_type=ReferenceType.TOURNAMENT.value,
            allow_self=True,
        )
        return JoinResponse(
            tournament=TournamentItem.from_domain(tournament, joined=True),
            entry_fee_paid=fee,
            balance_after=balance_after,
        )

    async def leave(
        self, db: AsyncSession, user_id: str, tournament_id: str
    ) -> LeaveResponse:
        try:
            tournament = await self._repo.get_tournament(db, tournament_id, for_update=True)
            if tournament is None:
                raise TournamentNotFoundError(tournament_id)
            if not await self._repo.delete_entry(db, tournament_id, user_id):
                raise NotJoinedError()
            tournament = await self._repo.remove_player(db, tournament_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Tournament %s left by %s (no refund) players=%d/%d",
            tournament_id, user_id, tournament.current_players, tournament.max_players,
        )
        return LeaveResponse(tournament=TournamentItem.from_domain(tournament, joined=False))

    async def leaderboard(self, db: AsyncSession, tournament_id: str) -> list[EntryItem]:
        if await self._repo.get_tournament(db, tournament_id) is None:
            raise TournamentNotFoundError(tournament_id)
        rows = await self._repo.leaderboard(db, tournament_id, _LEADERBOARD_LIMIT)
        return [EntryItem.from_domain(e, rank) for rank, e in enumerate(rows, start=1)]

    async def update_score(
        self, db: AsyncSession, user_id: str, tournament_id: str, score: int
    ) -> ScoreResponse:
        try:
            if await self._repo.get_tournament(db, tournament_id) is None:
                raise TournamentNotFoundError(tournament_id)
            entry = await self._repo.set_score(db, tournament_id, user_id, score)
            if entry is None:
                raise NotJoinedError()
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ScoreResponse(tournament_id=tournament_id, user_id=user_id, score=entry.score)
