"""006: create ledger_entries table

Revision ID: 006
Revises: 005
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE ledger_entries (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            amount          INTEGER         NOT NULL,
            source_kind     VARCHAR(20)     NOT NULL,
            source_ref      VARCHAR(64)     NOT NULL,
            business_id     INTEGER,
            description     VARCHAR(500),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_ledger_source_kind CHECK (
                source_kind IN ('CHECKIN', 'RSVP', 'SURVEY', 'REDEMPTION', 'ADJUSTMENT')
            ),
            CONSTRAINT ck_ledger_amount_sign CHECK (
                (source_kind IN ('CHECKIN', 'RSVP', 'SURVEY') AND amount >= 0)
                OR (source_kind = 'REDEMPTION' AND amount < 0)
                OR (source_kind = 'ADJUSTMENT' AND amount <> 0)
            )
        );
    """)
    # One credit per activity; INSERT ... ON CONFLICT DO NOTHING relies on this.
    op.execute("""
        CREATE UNIQUE INDEX idx_ledger_credit_once
        ON ledger_entries (user_id, source_kind, source_ref)
        WHERE source_kind IN ('CHECKIN', 'RSVP', 'SURVEY');
    """)
    op.execute("""
        CREATE UNIQUE INDEX idx_ledger_redemption_debit
        ON ledger_entries (source_ref)
        WHERE source_kind = 'REDEMPTION';
    """)
    op.execute("CREATE INDEX idx_ledger_user_time ON ledger_entries (user_id, created_at, id);")
    op.execute("""
        CREATE TRIGGER trg_ledger_entries_append_only
            BEFORE UPDATE OR DELETE ON ledger_entries
            FOR EACH ROW EXECUTE FUNCTION fn_reject_mutation();
    """)
    op.execute("COMMENT ON TABLE ledger_entries IS 'Points ledger: append-only, balance = SUM(amount) per user';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS ledger_entries CASCADE;")
