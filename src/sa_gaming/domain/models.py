"""Domain models for sa_gaming — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Game:
    id: str
    title: str
    description: str | None = None
    cover_image: str | None = None
    category: str = "action"
    players: int = 0
    rating: int = 0
    is_live: bool = False
    created_at: datetime | None = None


@dataclass
class Tournament:
    id: str
    title: str
    entry_fee: int
    prize_pool: int
    max_players: int
    current_players: int
    status: str                      # TournamentStatus value
    game_id: str | None = None
    description: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def is_full(self) -> bool:
        return self.current_players >= self.max_players


@dataclass
class TournamentEntry:
    id: str
    tournament_id: str
    user_id: str
    score: int = 0
    joined_at: datetime | None = None
    # Joined user display info (leaderboard only)
    username: str | None = None
    display_name: str | None = None
    avatar: str | None = None
