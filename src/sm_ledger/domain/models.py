"""Domain models for sm_ledger: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.sm_common.enums import CREDIT_KINDS, SourceKind


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL
    user_id: str
    amount: int                      # points, positive=credit negative=debit
    source_kind: str                 # SourceKind value
    source_ref: str                  # event id / survey id / redemption id
    business_id: int | None = None
    description: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class NewLedgerEntry:
    """An entry about to be appended. Sign rules mirror ck_ledger_amount_sign."""

    user_id: str
    amount: int
    source_kind: SourceKind
    source_ref: str
    business_id: int | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if self.is_credit and self.amount < 0:
            raise ValueError(f"{self.source_kind.value} credit cannot be negative: {self.amount}")
        if self.source_kind is SourceKind.REDEMPTION and self.amount >= 0:
            raise ValueError(f"REDEMPTION debit must be negative: {self.amount}")
        if self.source_kind is SourceKind.ADJUSTMENT and self.amount == 0:
            raise ValueError("ADJUSTMENT amount must be non-zero")

    @property
    def is_credit(self) -> bool:
        return self.source_kind in CREDIT_KINDS
