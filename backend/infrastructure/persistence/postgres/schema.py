from __future__ import annotations

# Executed in order by every store on pool init; each statement is idempotent so
# stores may bootstrap in any order against the same database.
SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS chat_users (
        id text PRIMARY KEY,
        created_at timestamptz NOT NULL DEFAULT NOW()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS chat_conversations (
        id text PRIMARY KEY,
        user_id text NOT NULL REFERENCES chat_users(id) ON DELETE CASCADE,
        title text NOT NULL DEFAULT 'New conversation',
        parent_id text REFERENCES chat_conversations(id) ON DELETE SET NULL,
        created_at timestamptz NOT NULL DEFAULT NOW()
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_chat_conversations_user_created
    ON chat_conversations(user_id, created_at DESC);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_chat_conversations_parent
    ON chat_conversations(parent_id);
    """,
    """
    CREATE TABLE IF NOT EXISTS conversation_memos (
        user_id text NOT NULL REFERENCES chat_users(id) ON DELETE CASCADE,
        conversation_id text NOT NULL REFERENCES chat_conversations(id) ON DELETE CASCADE,
        content text NOT NULL,
        created_at timestamptz NOT NULL DEFAULT NOW(),
        updated_at timestamptz NOT NULL DEFAULT NOW(),
        PRIMARY KEY (user_id, conversation_id)
    );
    """,
)
