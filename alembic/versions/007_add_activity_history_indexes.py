"""007: index event_rsvps and checkins for per-user history pages

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
    op.execute("CREATE INDEX idx_event_rsvps_user ON event_rsvps (user_id, id DESC);")
    op.execute("CREATE INDEX idx_checkins_user ON checkins (user_id, id DESC);")


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS idx_checkins_user;")
    op.execute("DROP INDEX IF EXISTS idx_event_rsvps_user;")
