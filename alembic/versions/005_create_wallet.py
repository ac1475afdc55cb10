"""005: create gifts and coin_transactions

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE gifts (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            sender_id       VARCHAR(64)     NOT NULL REFERENCES users(id),
            receiver_id     VARCHAR(64)     NOT NULL REFERENCES users(id),
            post_id         VARCHAR(64)     REFERENCES posts(id) ON DELETE SET NULL,
            amount          INTEGER         NOT NULL,
            gift_type       VARCHAR(50)     NOT NULL DEFAULT 'coins',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_gifts_amount  CHECK (amount > 0),
            CONSTRAINT ck_gifts_no_self CHECK (sender_id <> receiver_id)
        );
    """)
    op.execute("CREATE INDEX idx_gifts_receiver ON gifts (receiver_id, created_at DESC);")
    op.execute("CREATE INDEX idx_gifts_sender ON gifts (sender_id, created_at DESC);")

    op.execute("""
        CREATE TABLE coin_transactions (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            type            VARCHAR(32)     NOT NULL,
            amount          INTEGER         NOT NULL,
            balance_after   INTEGER         NOT NULL,
            reference_type  VARCHAR(16),
            reference_id    VARCHAR(64),
            description     TEXT,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_coin_tx_type CHECK (type IN (
                'gift_sent', 'gift_received', 'investment',
                'withdraw', 'tournament_entry', 'tournament_prize'
            )),
            CONSTRAINT ck_coin_tx_amount_nonzero CHECK (amount <> 0),
            CONSTRAINT ck_coin_tx_balance_nonneg CHECK (balance_after >= 0)
        );
    """)
    op.execute(
        "CREATE INDEX idx_coin_tx_user ON coin_transactions (user_id, id DESC);"
    )
    op.execute(
        "CREATE INDEX idx_coin_tx_reference ON coin_transactions (reference_type, reference_id);"
    )
    # Append-only ledger
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_coin_tx_immutable()
        RETURNS TRIGGER AS $$
        BEGIN
            RAISE EXCEPTION 'coin_transactions is append-only';
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER trg_coin_tx_immutable
            BEFORE UPDATE OR DELETE ON coin_transactions
            FOR EACH ROW EXECUTE FUNCTION fn_coin_tx_immutable();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS coin_transactions CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_coin_tx_immutable();")
    op.execute("DROP TABLE IF EXISTS gifts CASCADE;")
