"""Market state machine.

    OPEN ──close──▶ CLOSED ──resolve──▶ SETTLED
      │                │
      └────cancel──────┴──────────────▶ CANCELLED

Every function validates first and mutates last, so a raised error leaves
the market untouched.
"""

from datetime import datetime

from src.wb_common.datetime_utils import ensure_utc
from src.wb_common.enums import MarketStatus, Side, parse_side
from src.wb_common.errors import (
    InvalidStateError,
    MarketClosedError,
    StakeNotPositiveError,
    UnknownOutcomeError,
)
from src.wb_market.domain.models import Market


def deadline_passed(market: Market, now: datetime) -> bool:
    return ensure_utc(now) > ensure_utc(market.deadline)


def close_market(market: Market, now: datetime) -> None:
    if market.status != MarketStatus.OPEN:
        raise InvalidStateError(market.id, market.status.value, "close")
    market.status = MarketStatus.CLOSED
    market.closed_at = now
    market.updated_at = now


def close_if_expired(market: Market, now: datetime) -> bool:
    """Close an OPEN market whose deadline is behind ``now``. Returns True if it closed."""
    if market.status != MarketStatus.OPEN or not deadline_passed(market, now):
        return False
    close_market(market, now)
    return True


def resolve_market(market: Market, outcome: object, now: datetime) -> Side:
    if market.status != MarketStatus.CLOSED:
        raise InvalidStateError(market.id, market.status.value, "resolve")
    try:
        side = parse_side(outcome)
    except ValueError:
        raise UnknownOutcomeError(outcome) from None
    market.status = MarketStatus.SETTLED
    market.outcome = side
    market.settled_at = now
    market.updated_at = now
    return side


def cancel_market(market: Market, now: datetime) -> None:
    if market.status not in (MarketStatus.OPEN, MarketStatus.CLOSED):
        raise InvalidStateError(market.id, market.status.value, "cancel")
    market.status = MarketStatus.CANCELLED
    market.cancelled_at = now
    market.updated_at = now


def add_to_pool(market: Market, side: object, amount: int) -> None:
    """Increment one pool. Only OPEN markets take money; pools never shrink here."""
    try:
        side = parse_side(side)
    except ValueError:
        raise UnknownOutcomeError(side) from None
    if market.status != MarketStatus.OPEN:
        raise MarketClosedError(market.id, market.status.value)
    if amount <= 0:
        raise StakeNotPositiveError(amount)
    if side is Side.YES:
        market.yes_pool += amount
    elif side is Side.NO:
        market.no_pool += amount
