"""002: create directory reference tables (businesses, events, surveys)

Revision ID: 002
Revises: 001
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE businesses (
            id              SERIAL          PRIMARY KEY,
            name            VARCHAR(200)    NOT NULL,
            description     TEXT,
            category        VARCHAR(100),
            address         VARCHAR(300),
            owner_id        VARCHAR(64),
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("""
        CREATE TABLE events (
            id              SERIAL          PRIMARY KEY,
            name            VARCHAR(200)    NOT NULL,
            description     TEXT,
            event_date      TIMESTAMPTZ     NOT NULL,
            location        VARCHAR(300)    NOT NULL,
            image_url       VARCHAR(500),
            organizer_id    VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("""
        CREATE TABLE surveys (
            id              SERIAL          PRIMARY KEY,
            title           VARCHAR(200)    NOT NULL,
            description     TEXT,
            questions       JSONB,
            reward_points   INTEGER         NOT NULL DEFAULT 10,
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_surveys_reward_points_gte_0 CHECK (reward_points >= 0)
        );
    """)
    for table in ("businesses", "events", "surveys"):
        op.execute(f"""
            CREATE TRIGGER trg_{table}_updated_at
                BEFORE UPDATE ON {table}
                FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
        """)
    op.execute("COMMENT ON TABLE businesses IS 'Directory: owned by catalog management, read-only here';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS surveys CASCADE;")
    op.execute("DROP TABLE IF EXISTS events CASCADE;")
    op.execute("DROP TABLE IF EXISTS businesses CASCADE;")
