"""005: create redemptions table

Revision ID: 005
Revises: 004
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE redemptions (
            id                  BIGSERIAL       PRIMARY KEY,
            user_id             VARCHAR(64)     NOT NULL,
            reward_item_id      INTEGER         NOT NULL REFERENCES reward_items(id),
            business_id         INTEGER         REFERENCES businesses(id),
            points_redeemed     INTEGER         NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_redemptions_points_gt_0 CHECK (points_redeemed > 0)
        );
    """)
    op.execute("CREATE INDEX idx_redemptions_user ON redemptions (user_id, id DESC);")
    op.execute("CREATE INDEX idx_redemptions_item ON redemptions (reward_item_id);")
    op.execute("""
        CREATE TRIGGER trg_redemptions_immutable
            BEFORE UPDATE OR DELETE ON redemptions
            FOR EACH ROW EXECUTE FUNCTION fn_reject_mutation();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS redemptions CASCADE;")
