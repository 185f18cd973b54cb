"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Points ledger
  3xxx: Rewards / redemption
  4xxx: Activity (RSVP, check-in, survey)
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired access token", 401)


class ServiceRoleRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Service role required", 403)


# --- 2xxx: Points ledger ---

class DuplicateActivityError(AppError):
    """Credit already recorded for (user_id, source_kind, source_ref).

    Benign: the Award Policy turns this into an "already awarded" outcome.
    """

    def __init__(self, user_id: str, source_kind: str, source_ref: str) -> None:
        self.user_id = user_id
        self.source_kind = source_kind
        self.source_ref = source_ref
        super().__init__(
            2001,
            f"Points already awarded for {source_kind} {source_ref}",
            409,
        )


class DataIntegrityFaultError(AppError):
    def __init__(self, user_id: str, balance: int) -> None:
        self.user_id = user_id
        self.balance = balance
        super().__init__(
            2002,
            f"Ledger integrity fault: negative balance {balance} for user {user_id}",
            500,
        )


class InvalidPointsError(AppError):
    def __init__(self, points: object) -> None:
        super().__init__(2003, f"Points must be a non-negative integer, got {points!r}", 422)


# --- 3xxx: Rewards ---

class RewardItemNotFoundError(AppError):
    def __init__(self, reward_item_id: int) -> None:
        super().__init__(3001, f"Reward item not found: {reward_item_id}", 404)


class RewardInactiveError(AppError):
    def __init__(self, reward_item_id: int) -> None:
        super().__init__(3002, f"Reward {reward_item_id} is no longer available", 400)


class RewardExpiredError(AppError):
    def __init__(self, reward_item_id: int) -> None:
        super().__init__(3003, f"Reward {reward_item_id} has expired", 400)


class RewardExhaustedError(AppError):
    def __init__(self, reward_item_id: int) -> None:
        super().__init__(
            3004, f"Reward {reward_item_id} has been fully redeemed", 400
        )


class InsufficientPointsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            3005,
            f"Insufficient points: you need {required - available} more points "
            f"(required {required}, available {available})",
            400,
        )


class RewardBusinessMismatchError(AppError):
    def __init__(self, reward_item_id: int, business_id: int) -> None:
        super().__init__(
            3006,
            f"Reward {reward_item_id} cannot be redeemed at business {business_id}",
            400,
        )


class BusinessNotFoundError(AppError):
    def __init__(self, business_id: int) -> None:
        super().__init__(3007, f"Business not found: {business_id}", 404)


# --- 4xxx: Activity ---

class EventNotFoundError(AppError):
    def __init__(self, event_id: int) -> None:
        super().__init__(4001, f"Event not found: {event_id}", 404)


class RsvpRequiredError(AppError):
    def __init__(self, event_id: int) -> None:
        super().__init__(4002, f"You must RSVP to event {event_id} before checking in", 400)


class SurveyNotFoundError(AppError):
    def __init__(self, survey_id: int) -> None:
        super().__init__(4003, f"Survey not found: {survey_id}", 404)


class SurveyInactiveError(AppError):
    def __init__(self, survey_id: int) -> None:
        super().__init__(4004, f"Survey is not active: {survey_id}", 400)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class TransientFailureError(AppError):
    """Storage hiccup: the whole operation is safe to retry."""

    def __init__(self, detail: str = "Temporarily unavailable, please retry later") -> None:
        super().__init__(9003, detail, 503)
