"""Stake placement — the only path by which money enters a market's pools.

Called by BettingEngine while it holds the market lock, after the
funds-transfer collaborator has confirmed the bettor's payment.
"""

import logging
from datetime import datetime

from src.wb_betting.domain.models import Stake
from src.wb_common.enums import parse_side
from src.wb_common.errors import (
    DeadlinePassedError,
    MarketClosedError,
    StakeLimitExceededError,
    StakeNotPositiveError,
    UnknownOutcomeError,
)
from src.wb_common.id_generator import generate_id
from src.wb_market.domain.models import Market
from src.wb_market.domain.state import add_to_pool, deadline_passed
from src.wb_pricing.domain.pricing import PricingPolicy

logger = logging.getLogger(__name__)


def check_stake_amount(amount: int, max_stake: int | None) -> None:
    if amount <= 0:
        raise StakeNotPositiveError(amount)
    if max_stake is not None and amount > max_stake:
        raise StakeLimitExceededError(amount, max_stake)


def place_stake(
    market: Market,
    bettor_id: str,
    side: object,
    amount: int,
    now: datetime,
    pricing: PricingPolicy,
    max_stake: int | None = None,
) -> Stake:
    """Validate, quote, then add ``amount`` to the market pool and return the new Stake.

    Raises MarketClosedError, DeadlinePassedError, StakeNotPositiveError,
    StakeLimitExceededError or UnknownOutcomeError. Nothing is mutated when
    an error is raised.
    """
    try:
        side = parse_side(side)
    except ValueError:
        raise UnknownOutcomeError(side) from None
    if not market.is_open:
        raise MarketClosedError(market.id, market.status.value)
    if deadline_passed(market, now):
        raise DeadlinePassedError(market.id)
    check_stake_amount(amount, max_stake)

    quote = pricing.quote(market, side, amount)
    add_to_pool(market, side, amount)
    market.updated_at = now

    stake = Stake(
        id=generate_id("STK-"),
        market_id=market.id,
        bettor_id=bettor_id,
        side=side,
        amount=amount,
        placed_at=now,
        quoted_odds=quote.odds,
        quoted_payout=quote.potential_payout,
    )
    logger.debug(
        "Stake placed: market=%s side=%s amount=%d odds=%s pools=(%d, %d)",
        market.id, side.value, amount, quote.odds, market.yes_pool, market.no_pool,
    )
    return stake
