"""Stake domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.wb_common.enums import MarketStatus, Side, StakeStatus
from src.wb_market.domain.models import Market


@dataclass
class Stake:
    id: str
    market_id: str
    bettor_id: str          # wallet address or account id, opaque
    side: Side
    amount: int             # cents, > 0, fixed at creation
    placed_at: datetime
    # Quote captured at commit time
    quoted_odds: Decimal
    quoted_payout: int      # cents
    # Written once, by settlement or cancellation
    payout: int | None = None
    settled_at: datetime | None = None

    @property
    def is_paid_out(self) -> bool:
        return self.payout is not None


def stake_status(stake: Stake, market: Market | None) -> StakeStatus:
    """Bettor-facing status of a stake given its market's current state."""
    if stake.payout is None or market is None:
        return StakeStatus.PENDING
    if market.status == MarketStatus.CANCELLED:
        return StakeStatus.REFUNDED
    if market.outcome is not None and stake.side == market.outcome:
        return StakeStatus.WON
    if stake.payout > 0:
        # nobody backed the winning side: losing stakes were refunded pro rata
        return StakeStatus.REFUNDED
    return StakeStatus.LOST
