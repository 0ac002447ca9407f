"""Initial schema: topics, activities, sessions and the focus challenge.

Partial unique indexes enforce at most one active session per activity and
at most one active challenge.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Topics ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS topics (
            id UUID PRIMARY KEY,
            title VARCHAR(255) NOT NULL,
            category VARCHAR(255) NOT NULL,
            notes TEXT NOT NULL DEFAULT '',
            urls JSONB NOT NULL DEFAULT '[]',
            money_per_5_reps DOUBLE PRECISION NOT NULL DEFAULT 0,
            is_money_per_5_reps_locked BOOLEAN NOT NULL DEFAULT FALSE,
            earnings DOUBLE PRECISION NOT NULL DEFAULT 0,
            completion_percentage DOUBLE PRECISION NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_topics_category ON topics (category)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS subtopics (
            id UUID PRIMARY KEY,
            topic_id UUID NOT NULL REFERENCES topics(id) ON DELETE CASCADE,
            title VARCHAR(255) NOT NULL,
            notes TEXT NOT NULL DEFAULT '',
            urls JSONB NOT NULL DEFAULT '[]',
            reps_completed INTEGER NOT NULL DEFAULT 0,
            reps_goal INTEGER NOT NULL DEFAULT 18,
            goal_amount DOUBLE PRECISION NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_subtopics_topic_id ON subtopics (topic_id)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS global_settings (
            id UUID PRIMARY KEY,
            key VARCHAR(64) NOT NULL UNIQUE,
            value DOUBLE PRECISION NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Activities ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS activities (
            id UUID PRIMARY KEY,
            name VARCHAR(255) NOT NULL UNIQUE,
            reps INTEGER NOT NULL DEFAULT 0,
            goals JSONB NOT NULL,
            is_time_based BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS activity_sessions (
            id UUID PRIMARY KEY,
            activity_id UUID NOT NULL REFERENCES activities(id) ON DELETE CASCADE,
            start_time TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            end_time TIMESTAMPTZ,
            duration_minutes INTEGER NOT NULL DEFAULT 0,
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            session_type VARCHAR(16) NOT NULL DEFAULT 'manual',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_activity_sessions_activity_id ON activity_sessions (activity_id)")
    op.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS uq_activity_sessions_one_active
        ON activity_sessions (activity_id)
        WHERE is_active
    """)

    # --- Motivational challenge ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS motivational_challenges (
            id UUID PRIMARY KEY,
            start_date TIMESTAMPTZ NOT NULL,
            end_date TIMESTAMPTZ NOT NULL,
            ultimate_focus_goal_hours DOUBLE PRECISION NOT NULL,
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS uq_motivational_challenges_single_active
        ON motivational_challenges (is_active)
        WHERE is_active
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS daily_motivational_quotes (
            id UUID PRIMARY KEY,
            quote_text TEXT NOT NULL UNIQUE,
            author VARCHAR(255),
            category VARCHAR(64),
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS challenge_progress (
            id UUID PRIMARY KEY,
            challenge_id UUID NOT NULL REFERENCES motivational_challenges(id) ON DELETE CASCADE,
            progress_date DATE NOT NULL,
            daily_focus_minutes INTEGER NOT NULL DEFAULT 0,
            countdown_seconds_remaining INTEGER NOT NULL DEFAULT 0,
            daily_quote_id UUID REFERENCES daily_motivational_quotes(id) ON DELETE SET NULL,
            is_active_period BOOLEAN NOT NULL DEFAULT FALSE,
            last_countdown_update TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_challenge_progress_challenge_date UNIQUE (challenge_id, progress_date)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_challenge_progress_challenge_id ON challenge_progress (challenge_id)")


def downgrade() -> None:
    op.drop_table("challenge_progress")
    op.drop_table("daily_motivational_quotes")
    op.drop_table("motivational_challenges")
    op.drop_table("activity_sessions")
    op.drop_table("activities")
    op.drop_table("global_settings")
    op.drop_table("subtopics")
    op.drop_table("topics")
