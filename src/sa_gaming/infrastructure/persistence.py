"""GamingRepository — games, tournaments and entries in raw SQL.

Tournament counters are changed with single UPDATE ... RETURNING statements.
The CHECK (current_players BETWEEN 0 AND max_players) constraint backs the
service-level full/empty checks.

Transaction ownership: the calling application service commits.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.errors import InternalError, TournamentNotFoundError
from src.sa_gaming.domain.models import Game, Tournament, TournamentEntry

_GAME_COLUMNS = """
    id, title, description, cover_image, category, players, rating, is_live, created_at
"""

_TOURNAMENT_COLUMNS = """
    id, game_id, title, description, entry_fee, prize_pool, max_players,
    current_players, status, starts_at, ends_at, created_at
"""

# ---------------------------------------------------------------------------
# SQL: games
# ---------------------------------------------------------------------------

_LIST_GAMES_SQL = text(f"""
    SELECT {_GAME_COLUMNS}
    FROM games
    WHERE (CAST(:category AS TEXT) IS NULL OR category = CAST(:category AS TEXT))
    ORDER BY players DESC, title ASC
    LIMIT :limit
""")

_GET_GAME_SQL = text(f"SELECT {_GAME_COLUMNS} FROM games WHERE id = :id")

_INSERT_GAME_SQL = text(f"""
    INSERT INTO games (title, description, cover_image, category, is_live)
    VALUES (:title, :description, :cover_image, :category, :is_live)
    RETURNING {_GAME_COLUMNS}
""")

# ---------------------------------------------------------------------------
# SQL: tournaments
# ---------------------------------------------------------------------------

_LIST_TOURNAMENTS_SQL = text(f"""
    SELECT {_TOURNAMENT_COLUMNS}
    FROM tournaments
    WHERE (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
    ORDER BY starts_at ASC NULLS LAST, created_at DESC
    LIMIT :limit
""")

_GET_TOURNAMENT_SQL = text(f"SELECT {_TOURNAMENT_COLUMNS} FROM tournaments WHERE id = :id")

_GET_TOURNAMENT_FOR_UPDATE_SQL = text(f"""
    SELECT {_TOURNAMENT_COLUMNS} FROM tournaments WHERE id = :id FOR UPDATE
""")

_INSERT_TOURNAMENT_SQL = text(f"""
    INSERT INTO tournaments
        (game_id, title, description, entry_fee, prize_pool, max_players,
         status, starts_at, ends_at)
    VALUES
        (:game_id, :title, :description, :entry_fee, :prize_pool, :max_players,
         :status, :starts_at, :ends_at)
    RETURNING {_TOURNAMENT_COLUMNS}
""")

_ADD_PLAYER_SQL = text(f"""
    UPDATE tournaments
    SET current_players = current_players + 1,
        prize_pool = prize_pool + :fee
    WHERE id = :id
    RETURNING {_TOURNAMENT_COLUMNS}
""")

# prize_pool is left as is; leaving does not refund the entry fee
_REMOVE_PLAYER_SQL = text(f"""
    UPDATE tournaments
    SET current_players = current_players - 1
    WHERE id = :id
    RETURNING {_TOURNAMENT_COLUMNS}
""")

# ---------------------------------------------------------------------------
# SQL: entries
# ---------------------------------------------------------------------------

_HAS_ENTRY_SQL = text("""
    SELECT 1 FROM tournament_entries
    WHERE tournament_id = :tournament_id AND user_id = :user_id
""")

_INSERT_ENTRY_SQL = text("""
    INSERT INTO tournament_entries (tournament_id, user_id)
    VALUES (:tournament_id, :user_id)
    RETURNING id, tournament_id, user_id, score, joined_at
""")

_DELETE_ENTRY_SQL = text("""
    DELETE FROM tournament_entries
    WHERE tournament_id = :tournament_id AND user_id = :user_id
    RETURNING id
""")

_SET_SCORE_SQL = text("""
    UPDATE tournament_entries SET score = :score
    WHERE tournament_id = :tournament_id AND user_id = :user_id
    RETURNING id, tournament_id, user_id, score, joined_at
""")

_LEADERBOARD_SQL = text("""
    SELECT e.id, e.tournament_id, e.user_id, e.score, e.joined_at,
           u.username, u.display_name, u.avatar
    FROM tournament_entries e
    JOIN users u ON u.id = e.user_id
    WHERE e.tournament_id = :tournament_id
    ORDER BY e.score DESC, e.joined_at ASC
    LIMIT :limit
""")


def _row_to_game(row: object) -> Game:
    return Game(
        id=row.id,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        cover_image=row.cover_image,  # type: ignore[attr-defined]
        category=row.category,  # type: ignore[attr-defined]
        players=row.players,  # type: ignore[attr-defined]
        rating=row.rating,  # type: ignore[attr-defined]
        is_live=row.is_live,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_tournament(row: object) -> Tournament:
    return Tournament(
        id=row.id,  # type: ignore[attr-defined]
        game_id=row.game_id,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        entry_fee=row.entry_fee,  # type: ignore[attr-defined]
        prize_pool=row.prize_pool,  # type: ignore[attr-defined]
        max_players=row.max_players,  # type: ignore[attr-defined]
        current_players=row.current_players,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        starts_at=row.starts_at,  # type: ignore[attr-defined]
        ends_at=row.ends_at,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_entry(row: object) -> TournamentEntry:
    return TournamentEntry(
        id=row.id,  # type: ignore[attr-defined]
        tournament_id=row.tournament_id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        score=row.score,  # type: ignore[attr-defined]
        joined_at=row.joined_at,  # type: ignore[attr-defined]
        username=getattr(row, "username", None),
        display_name=getattr(row, "display_name", None),
        avatar=getattr(row, "avatar", None),
    )


class GamingRepository:
    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------

    async def list_games(
        self, db: AsyncSession, category: str | None, limit: int
    ) -> list[Game]:
        result = await db.execute(_LIST_GAMES_SQL, {"category": category, "limit": limit})
        return [_row_to_game(row) for row in result.fetchall()]

    async def get_game(self, db: AsyncSession, game_id: str) -> Game | None:
        result = await db.execute(_GET_GAME_SQL, {"id": game_id})
        row = result.fetchone()
        return _row_to_game(row) if row else None

    async def create_game(
        self,
        db: AsyncSession,
        title: str,
        description: str | None,
        cover_image: str | None,
        category: str,
        is_live: bool,
    ) -> Game:
        result = await db.execute(
            _INSERT_GAME_SQL,
            {
                "title": title,
                "description": description,
                "cover_image": cover_image,
                "category": category,
                "is_live": is_live,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Game insert returned no rows — this should never happen")
        return _row_to_game(row)

    # ------------------------------------------------------------------
    # Tournaments
    # ------------------------------------------------------------------

    async def list_tournaments(
        self, db: AsyncSession, status: str | None, limit: int
    ) -> list[Tournament]:
        result = await db.execute(_LIST_TOURNAMENTS_SQL, {"status": status, "limit": limit})
        return [_row_to_tournament(row) for row in result.fetchall()]

    async def get_tournament(
        self, db: AsyncSession, tournament_id: str, for_update: bool = False
    ) -> Tournament | None:
        sql = _GET_TOURNAMENT_FOR_UPDATE_SQL if for_update else _GET_TOURNAMENT_SQL
        result = await db.execute(sql, {"id": tournament_id})
        row = result.fetchone()
        return _row_to_tournament(row) if row else None

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
    ) -> Tournament:
        result = await db.execute(
            _INSERT_TOURNAMENT_SQL,
            {
                "game_id": game_id,
                "title": title,
                "description": description,
                "entry_fee": entry_fee,
                "prize_pool": prize_pool,
                "max_players": max_players,
                "status": status,
                "starts_at": starts_at,
                "ends_at": ends_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Tournament insert returned no rows — this should never happen")
        return _row_to_tournament(row)

    async def add_player(
        self, db: AsyncSession, tournament_id: str, fee: int
    ) -> Tournament:
        result = await db.execute(_ADD_PLAYER_SQL, {"id": tournament_id, "fee": fee})
        row = result.fetchone()
        if row is None:
            raise TournamentNotFoundError(tournament_id)
        return _row_to_tournament(row)

    async def remove_player(self, db: AsyncSession, tournament_id: str) -> Tournament:
        result = await db.execute(_REMOVE_PLAYER_SQL, {"id": tournament_id})
        row = result.fetchone()
        if row is None:
            raise TournamentNotFoundError(tournament_id)
        return _row_to_tournament(row)

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    async def has_entry(
        self, db: AsyncSession, tournament_id: str, user_id: str
    ) -> bool:
        result = await db.execute(
            _HAS_ENTRY_SQL, {"tournament_id": tournament_id, "user_id": user_id}
        )
        return result.fetchone() is not None

    async def insert_entry(
        self, db: AsyncSession, tournament_id: str, user_id: str
    ) -> TournamentEntry:
        result = await db.execute(
            _INSERT_ENTRY_SQL, {"tournament_id": tournament_id, "user_id": user_id}
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Entry insert returned no rows — this should never happen")
        return _row_to_entry(row)

    async def delete_entry(
        self, db: AsyncSession, tournament_id: str, user_id: str
    ) -> bool:
        result = await db.execute(
            _DELETE_ENTRY_SQL, {"tournament_id": tournament_id, "user_id": user_id}
        )
        return result.fetchone() is not None

    async def set_score(
        self, db: AsyncSession, tournament_id: str, user_id: str, score: int
    ) -> TournamentEntry | None:
        result = await db.execute(
            _SET_SCORE_SQL,
            {"tournament_id": tournament_id, "user_id": user_id, "score": score},
        )
        row = result.fetchone()
        return _row_to_entry(row) if row else None

    async def leaderboard(
        self, db: AsyncSession, tournament_id: str, limit: int
    ) -> list[TournamentEntry]:
        result = await db.execute(
            _LEADERBOARD_SQL, {"tournament_id": tournament_id, "limit": limit}
        )
        return [_row_to_entry(row) for row in result.fetchall()]
