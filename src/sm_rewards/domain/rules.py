"""Redeemability rules, checked in this order by the Redemption Coordinator:

  1. item exists           (caller: RewardItemNotFoundError)
  2. item is active        RewardInactiveError
  3. item not expired      RewardExpiredError
  4. cap not reached       RewardExhaustedError
  5. business matches      RewardBusinessMismatchError
  6. business exists       (caller: BusinessNotFoundError)
  7. balance >= threshold  InsufficientPointsError

Pure functions; the coordinator supplies counts and balances read under lock.
"""

from datetime import datetime

from src.sm_common.datetime_utils import is_past
from src.sm_common.errors import (
    InsufficientPointsError,
    RewardBusinessMismatchError,
    RewardExhaustedError,
    RewardExpiredError,
    RewardInactiveError,
)
from src.sm_rewards.domain.models import RewardItem


def check_redeemable(item: RewardItem, redemption_count: int, now: datetime) -> None:
    if not item.is_active:
        raise RewardInactiveError(item.id)
    if is_past(item.expiration_date, now):
        raise RewardExpiredError(item.id)
    if item.max_redemptions is not None and redemption_count >= item.max_redemptions:
        raise RewardExhaustedError(item.id)


def check_affordable(balance: int, point_threshold: int) -> None:
    if balance < point_threshold:
        raise InsufficientPointsError(point_threshold, balance)


def resolve_business(item: RewardItem, requested_business_id: int | None) -> int | None:
    """Business the redemption is recorded against.

    Defaults to the item's own business. A business-scoped item can only be
    redeemed at that business; a global item can be redeemed anywhere.
    """
    if requested_business_id is None:
        return item.business_id
    if item.business_id is not None and item.business_id != requested_business_id:
        raise RewardBusinessMismatchError(item.id, requested_business_id)
    return requested_business_id
