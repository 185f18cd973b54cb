"""003: create activity tables (event_rsvps, checkins, survey_responses)

Revision ID: 003
Revises: 002
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE event_rsvps (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            event_id        INTEGER         NOT NULL REFERENCES events(id),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_event_rsvps_user_event UNIQUE (user_id, event_id)
        );
    """)
    op.execute("""
        CREATE TABLE checkins (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            event_id        INTEGER         NOT NULL REFERENCES events(id),
            points_earned   INTEGER         NOT NULL DEFAULT 5,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_checkins_user_event UNIQUE (user_id, event_id)
        );
    """)
    op.execute("""
        CREATE TABLE survey_responses (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            survey_id       INTEGER         NOT NULL REFERENCES surveys(id),
            responses       JSONB           NOT NULL DEFAULT '{}'::jsonb,
            points_earned   INTEGER         NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_survey_responses_user_survey UNIQUE (user_id, survey_id)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS survey_responses CASCADE;")
    op.execute("DROP TABLE IF EXISTS checkins CASCADE;")
    op.execute("DROP TABLE IF EXISTS event_rsvps CASCADE;")
