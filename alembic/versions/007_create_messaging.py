"""007: create conversations, conversation_members, messages, chat_messages

Revision ID: 007
Revises: 006
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE conversations (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            last_message_at TIMESTAMPTZ
        );
    """)
    op.execute("""
        CREATE TABLE conversation_members (
            conversation_id VARCHAR(64)     NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            joined_at       TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (conversation_id, user_id)
        );
    """)
    op.execute("CREATE INDEX idx_conversation_members_user ON conversation_members (user_id);")

    op.execute("""
        CREATE TABLE messages (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            conversation_id VARCHAR(64)     NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
            sender_id       VARCHAR(64)     NOT NULL REFERENCES users(id),
            content         TEXT            NOT NULL,
            is_read         BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute(
        "CREATE INDEX idx_messages_conversation ON messages (conversation_id, created_at);"
    )
    op.execute(
        "CREATE INDEX idx_messages_unread ON messages (conversation_id, sender_id) WHERE NOT is_read;"
    )

    op.execute("""
        CREATE TABLE chat_messages (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            role            VARCHAR(16)     NOT NULL,
            content         TEXT            NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_chat_messages_role CHECK (role IN ('user', 'assistant'))
        );
    """)
    op.execute("CREATE INDEX idx_chat_messages_user ON chat_messages (user_id, created_at);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS chat_messages CASCADE;")
    op.execute("DROP TABLE IF EXISTS messages CASCADE;")
    op.execute("DROP TABLE IF EXISTS conversation_members CASCADE;")
    op.execute("DROP TABLE IF EXISTS conversations CASCADE;")
