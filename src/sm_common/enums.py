"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class SourceKind(str, Enum):
    """What produced a ledger entry."""
    CHECKIN = "CHECKIN"
    RSVP = "RSVP"
    SURVEY = "SURVEY"
    REDEMPTION = "REDEMPTION"
    ADJUSTMENT = "ADJUSTMENT"


# One credit per (user_id, source_kind, source_ref); see idx_ledger_credit_once.
CREDIT_KINDS: frozenset[SourceKind] = frozenset(
    {SourceKind.CHECKIN, SourceKind.RSVP, SourceKind.SURVEY}
)
