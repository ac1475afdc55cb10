"""004: create follows and notifications

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE follows (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            follower_id     VARCHAR(64)     NOT NULL REFERENCES users(id),
            following_id    VARCHAR(64)     NOT NULL REFERENCES users(id),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_follows_pair    UNIQUE (follower_id, following_id),
            CONSTRAINT ck_follows_no_self CHECK (follower_id <> following_id)
        );
    """)
    op.execute("CREATE INDEX idx_follows_following ON follows (following_id);")

    op.execute("""
        CREATE TABLE notifications (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            actor_id        VARCHAR(64)     NOT NULL REFERENCES users(id),
            type            VARCHAR(16)     NOT NULL,
            body            TEXT,
            reference_id    VARCHAR(64),
            reference_type  VARCHAR(16),
            is_read         BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_notifications_type CHECK (
                type IN ('follow', 'like', 'comment', 'gift', 'tournament')
            )
        );
    """)
    op.execute(
        "CREATE INDEX idx_notifications_user ON notifications (user_id, created_at DESC);"
    )
    op.execute(
        "CREATE INDEX idx_notifications_unread ON notifications (user_id) WHERE NOT is_read;"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS notifications CASCADE;")
    op.execute("DROP TABLE IF EXISTS follows CASCADE;")
