"""Unified error codes and custom exceptions.

Every error carries a numeric ``code`` and a stable machine ``kind``; the
HTTP layer turns both into the ApiResponse envelope. Domain code never
builds user-facing text beyond the short ``message``.

Error code ranges:
  1xxx: Auth/Identity
  3xxx: Market
  4xxx: Stake
  5xxx: Settlement
  6xxx: Charity
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        kind: str = "APP_ERROR",
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.kind = kind
        super().__init__(message)


# --- 1xxx: Auth/Identity ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401, "INVALID_CREDENTIALS")


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Admin role required", 403, "ADMIN_REQUIRED")


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404, "MARKET_NOT_FOUND")


class MarketClosedError(AppError):
    def __init__(self, market_id: str, status: str) -> None:
        super().__init__(
            3002,
            f"Market {market_id} is not accepting stakes (status={status})",
            422,
            "MARKET_CLOSED",
        )


class DeadlinePassedError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3003, f"Deadline passed for market {market_id}", 422, "DEADLINE_PASSED")


class InvalidStateError(AppError):
    def __init__(self, market_id: str, status: str, action: str) -> None:
        super().__init__(
            3004,
            f"Cannot {action} market {market_id} in status {status}",
            409,
            "INVALID_STATE",
        )


class UnknownOutcomeError(AppError):
    def __init__(self, outcome: object) -> None:
        super().__init__(3005, f"Unknown outcome: {outcome!r}", 422, "UNKNOWN_OUTCOME")


class DuplicateSettlementError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(
            3006, f"Market {market_id} is already finalized", 409, "DUPLICATE_SETTLEMENT"
        )


class InvalidDeadlineError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3007, f"Invalid deadline: {detail}", 422, "INVALID_DEADLINE")


# --- 4xxx: Stake ---

class StakeNotPositiveError(AppError):
    def __init__(self, amount: int) -> None:
        super().__init__(
            4001, f"Stake amount must be positive, got {amount}", 422, "STAKE_NOT_POSITIVE"
        )


class StakeLimitExceededError(AppError):
    def __init__(self, amount: int, limit: int) -> None:
        super().__init__(
            4002,
            f"Stake amount {amount} cents exceeds limit {limit} cents",
            422,
            "STAKE_LIMIT_EXCEEDED",
        )


# --- 5xxx: Settlement ---

class InvalidFeeRateError(AppError):
    def __init__(self, fee_bps: int) -> None:
        super().__init__(
            5001, f"Fee rate must be in [0, 10000) bps, got {fee_bps}", 422, "INVALID_FEE_RATE"
        )


class StakeSetMismatchError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(5002, f"Stake set mismatch: {detail}", 409, "STAKE_SET_MISMATCH")


# --- 6xxx: Charity ---

class CharityEntryNotFoundError(AppError):
    def __init__(self, entry_id: str) -> None:
        super().__init__(6001, f"Charity entry not found: {entry_id}", 404, "CHARITY_NOT_FOUND")


class CharityAlreadyDistributedError(AppError):
    def __init__(self, entry_id: str) -> None:
        super().__init__(
            6002,
            f"Charity entry {entry_id} already distributed",
            409,
            "CHARITY_ALREADY_DISTRIBUTED",
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500, "INTERNAL")
