"""003: create posts, comments, reactions

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE posts (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            content         TEXT            NOT NULL,
            image_url       TEXT,
            video_url       TEXT,
            audio_url       TEXT,
            coin_cost       INTEGER         NOT NULL DEFAULT 0,
            likes           INTEGER         NOT NULL DEFAULT 0,
            reposts         INTEGER         NOT NULL DEFAULT 0,
            comments        INTEGER         NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_posts_coin_cost CHECK (coin_cost >= 0),
            CONSTRAINT ck_posts_counters  CHECK (likes >= 0 AND reposts >= 0 AND comments >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_posts_created ON posts (created_at DESC, id DESC);")
    op.execute("CREATE INDEX idx_posts_user_created ON posts (user_id, created_at DESC);")

    op.execute("""
        CREATE TABLE comments (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            post_id         VARCHAR(64)     NOT NULL REFERENCES posts(id) ON DELETE CASCADE,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            content         TEXT            NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("CREATE INDEX idx_comments_post ON comments (post_id, created_at);")

    # NULLs are distinct in UNIQUE constraints, so a post reaction never
    # collides with a comment reaction.
    op.execute("""
        CREATE TABLE reactions (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            post_id         VARCHAR(64)     REFERENCES posts(id) ON DELETE CASCADE,
            comment_id      VARCHAR(64)     REFERENCES comments(id) ON DELETE CASCADE,
            type            VARCHAR(16)     NOT NULL DEFAULT 'like',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_reactions_post    UNIQUE (user_id, post_id, type),
            CONSTRAINT uq_reactions_comment UNIQUE (user_id, comment_id, type),
            CONSTRAINT ck_reactions_target  CHECK (
                (post_id IS NOT NULL) <> (comment_id IS NOT NULL)
            ),
            CONSTRAINT ck_reactions_type    CHECK (type IN ('like'))
        );
    """)
    op.execute("CREATE INDEX idx_reactions_post ON reactions (post_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS reactions CASCADE;")
    op.execute("DROP TABLE IF EXISTS comments CASCADE;")
    op.execute("DROP TABLE IF EXISTS posts CASCADE;")
