"""LedgerRepository: concrete implementation of LedgerRepositoryProtocol.

ledger_entries is append-only: this module only ever INSERTs and SELECTs.
The anti-double-award rule is enforced by the partial unique index
idx_ledger_credit_once; a conflicting credit INSERT returns no row.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back. lock_user holds until that commit/rollback.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.errors import DuplicateActivityError, InternalError
from src.sm_ledger.domain.models import LedgerEntry, NewLedgerEntry

# First key of the two-int advisory lock; keeps our locks apart from other users of
# pg_advisory_xact_lock on the same database.
_USER_LOCK_NAMESPACE = 7301

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_LOCK_USER_SQL = text("""
    SELECT pg_advisory_xact_lock(:namespace, hashtext(:user_id))
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_id, amount, source_kind, source_ref, business_id, description)
    VALUES
        (:user_id, :amount, :source_kind, :source_ref, :business_id, :description)
    ON CONFLICT DO NOTHING
    RETURNING id, user_id, amount, source_kind, source_ref,
              business_id, description, created_at
""")

_ENTRIES_FOR_USER_SQL = text("""
    SELECT id, user_id, amount, source_kind, source_ref,
           business_id, description, created_at
    FROM ledger_entries
    WHERE user_id = :user_id
    ORDER BY created_at ASC, id ASC
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, user_id, amount, source_kind, source_ref,
           business_id, description, created_at
    FROM ledger_entries
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:source_kind AS TEXT) IS NULL OR source_kind = CAST(:source_kind AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        source_kind=row.source_kind,  # type: ignore[attr-defined]
        source_ref=row.source_ref,  # type: ignore[attr-defined]
        business_id=row.business_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class LedgerRepository:
    """Concrete repository: append-only writes, read queries, per-user lock."""

    async def lock_user(self, db: AsyncSession, user_id: str) -> None:
        await db.execute(
            _LOCK_USER_SQL, {"namespace": _USER_LOCK_NAMESPACE, "user_id": user_id}
        )

    async def append(self, db: AsyncSession, entry: NewLedgerEntry) -> LedgerEntry:
        result = await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "user_id": entry.user_id,
                "amount": entry.amount,
                "source_kind": entry.source_kind.value,
                "source_ref": entry.source_ref,
                "business_id": entry.business_id,
                "description": entry.description,
            },
        )
        row = result.fetchone()
        if row is None:
            if entry.is_credit:
                raise DuplicateActivityError(
                    entry.user_id, entry.source_kind.value, entry.source_ref
                )
            raise InternalError("Ledger insert returned no rows: this should never happen")
        return _row_to_ledger(row)

    async def entries_for_user(
        self, db: AsyncSession, user_id: str
    ) -> list[LedgerEntry]:
        result = await db.execute(_ENTRIES_FOR_USER_SQL, {"user_id": user_id})
        return [_row_to_ledger(row) for row in result.fetchall()]

    async def list_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        source_kind: str | None,
    ) -> list[LedgerEntry]:
        result = await db.execute(
            _LIST_LEDGER_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "source_kind": source_kind,
                "limit": limit,
            },
        )
        return [_row_to_ledger(row) for row in result.fetchall()]
