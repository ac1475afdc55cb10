"""006: create investments

Revision ID: 006
Revises: 005
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE investments (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            investor_id     VARCHAR(64)     NOT NULL REFERENCES users(id),
            target_type     VARCHAR(16)     NOT NULL,
            target_id       VARCHAR(64)     NOT NULL,
            target_name     TEXT            NOT NULL,
            amount          INTEGER         NOT NULL,
            return_rate     INTEGER         NOT NULL DEFAULT 0,
            status          VARCHAR(16)     NOT NULL DEFAULT 'active',
            payout          INTEGER,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            withdrawn_at    TIMESTAMPTZ,
            CONSTRAINT ck_investments_amount      CHECK (amount > 0),
            CONSTRAINT ck_investments_rate        CHECK (return_rate > -100),
            CONSTRAINT ck_investments_target_type CHECK (target_type IN ('user', 'plugin')),
            CONSTRAINT ck_investments_status      CHECK (status IN ('active', 'withdrawn')),
            CONSTRAINT ck_investments_settled     CHECK (
                (status = 'active' AND payout IS NULL AND withdrawn_at IS NULL)
                OR (status = 'withdrawn' AND payout IS NOT NULL AND withdrawn_at IS NOT NULL)
            )
        );
    """)
    op.execute(
        "CREATE INDEX idx_investments_investor ON investments (investor_id, created_at DESC);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS investments CASCADE;")
