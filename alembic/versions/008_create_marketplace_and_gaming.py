"""008: create plugins, games, tournaments, tournament_entries

Revision ID: 008
Revises: 007
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "008"
down_revision: Union[str, None] = "007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE plugins (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            name            TEXT            NOT NULL,
            description     TEXT,
            icon            TEXT,
            category        VARCHAR(50)     NOT NULL DEFAULT 'utility',
            price           INTEGER         NOT NULL DEFAULT 0,
            author_id       VARCHAR(64)     REFERENCES users(id),
            author_name     TEXT,
            downloads       INTEGER         NOT NULL DEFAULT 0,
            rating          INTEGER         NOT NULL DEFAULT 0,
            is_official     BOOLEAN         NOT NULL DEFAULT FALSE,
            status          VARCHAR(16)     NOT NULL DEFAULT 'published',
            nodes           JSONB,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_plugins_price CHECK (price >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_plugins_downloads ON plugins (downloads DESC);")

    op.execute("""
        CREATE TABLE games (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            title           TEXT            NOT NULL,
            description     TEXT,
            cover_image     TEXT,
            category        VARCHAR(50)     NOT NULL DEFAULT 'action',
            players         INTEGER         NOT NULL DEFAULT 0,
            rating          INTEGER         NOT NULL DEFAULT 0,
            is_live         BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)

    op.execute("""
        CREATE TABLE tournaments (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            game_id         VARCHAR(64)     REFERENCES games(id),
            title           TEXT            NOT NULL,
            description     TEXT,
            entry_fee       INTEGER         NOT NULL DEFAULT 0,
            prize_pool      INTEGER         NOT NULL DEFAULT 0,
            max_players     INTEGER         NOT NULL DEFAULT 100,
            current_players INTEGER         NOT NULL DEFAULT 0,
            status          VARCHAR(16)     NOT NULL DEFAULT 'upcoming',
            starts_at       TIMESTAMPTZ,
            ends_at         TIMESTAMPTZ,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_tournaments_fee     CHECK (entry_fee >= 0 AND prize_pool >= 0),
            CONSTRAINT ck_tournaments_players CHECK (
                max_players > 0 AND current_players BETWEEN 0 AND max_players
            ),
            CONSTRAINT ck_tournaments_status  CHECK (status IN ('upcoming', 'active', 'ended'))
        );
    """)

    op.execute("""
        CREATE TABLE tournament_entries (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            tournament_id   VARCHAR(64)     NOT NULL REFERENCES tournaments(id) ON DELETE CASCADE,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            score           INTEGER         NOT NULL DEFAULT 0,
            joined_at       TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_tournament_entries UNIQUE (tournament_id, user_id)
        );
    """)
    op.execute(
        "CREATE INDEX idx_tournament_entries_score "
        "ON tournament_entries (tournament_id, score DESC, joined_at);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS tournament_entries CASCADE;")
    op.execute("DROP TABLE IF EXISTS tournaments CASCADE;")
    op.execute("DROP TABLE IF EXISTS games CASCADE;")
    op.execute("DROP TABLE IF EXISTS plugins CASCADE;")
