"""004: create reward_items table

Revision ID: 004
Revises: 003
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE reward_items (
            id                  SERIAL          PRIMARY KEY,
            name                VARCHAR(200)    NOT NULL,
            description         TEXT,
            point_threshold     INTEGER         NOT NULL,
            business_id         INTEGER         REFERENCES businesses(id),
            image_url           VARCHAR(500),
            is_active           BOOLEAN         NOT NULL DEFAULT TRUE,
            expiration_date     TIMESTAMPTZ,
            max_redemptions     INTEGER,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_reward_items_threshold_gt_0 CHECK (point_threshold > 0),
            CONSTRAINT ck_reward_items_max_redemptions_gt_0 CHECK (
                max_redemptions IS NULL OR max_redemptions > 0
            )
        );
    """)
    op.execute("CREATE INDEX idx_reward_items_active ON reward_items (is_active, point_threshold);")
    op.execute("""
        CREATE TRIGGER trg_reward_items_updated_at
            BEFORE UPDATE ON reward_items
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS reward_items CASCADE;")
