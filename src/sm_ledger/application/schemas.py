"""Pydantic schemas and cursor utilities for sm_ledger API."""

import base64
import json

from pydantic import BaseModel

from src.sm_common.points import points_to_display
from src.sm_ledger.domain.models import LedgerEntry

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    points: int
    points_display: str

    @classmethod
    def from_points(cls, user_id: str, points: int) -> "BalanceResponse":
        return cls(user_id=user_id, points=points, points_display=points_to_display(points))


class LedgerEntryItem(BaseModel):
    id: int
    amount: int
    amount_display: str
    source_kind: str
    source_ref: str
    business_id: int | None
    description: str | None
    created_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, e: LedgerEntry) -> "LedgerEntryItem":
        return cls(
            id=e.id,
            amount=e.amount,
            amount_display=points_to_display(e.amount),
            source_kind=e.source_kind,
            source_ref=e.source_ref,
            business_id=e.business_id,
            description=e.description,
            created_at=e.created_at.isoformat() if e.created_at else "",
        )


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool
