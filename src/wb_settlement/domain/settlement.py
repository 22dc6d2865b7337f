"""Market settlement — compute every stake's payout and the charity fee.

Resolved markets (all amounts in cents):

    winning_pool = sum of stakes on the outcome side
    losing_pool  = sum of stakes on the other side
    charity_fee  = losing_pool * fee_bps // 10000
    prize        = losing_pool - charity_fee
    payout(w)    = w.amount + share of ``prize`` pro rata to w.amount
    payout(l)    = 0

so that sum(payouts) + charity_fee == winning_pool + losing_pool exactly.
If nobody backed the outcome, ``prize`` is refunded pro rata to the losing
side instead. Cancelled markets refund every stake at face value and take
no fee.

This module moves no money; the funds-transfer collaborator pays out from
the returned SettlementResult.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from src.wb_betting.domain.models import Stake
from src.wb_charity.domain.ledger import new_entry
from src.wb_charity.domain.models import CharityLedgerEntry
from src.wb_common.cents import calc_charity_fee, validate_fee_bps
from src.wb_common.enums import MarketStatus, Side, parse_side
from src.wb_common.errors import (
    DuplicateSettlementError,
    InvalidFeeRateError,
    InvalidStateError,
    StakeSetMismatchError,
    UnknownOutcomeError,
)
from src.wb_market.domain.models import Market
from src.wb_market.domain.state import cancel_market, resolve_market
from src.wb_settlement.domain.allocation import allocate_pro_rata

logger = logging.getLogger(__name__)


@dataclass
class SettlementResult:
    market_id: str
    outcome: Side | None            # None for cancelled markets
    winning_pool: int
    losing_pool: int
    charity_fee: int
    payouts: dict[str, int]         # stake_id -> cents
    ledger_entry: CharityLedgerEntry | None = None
    cancelled: bool = False
    no_winner_refund: bool = False
    settled_at: datetime | None = None
    bettor_totals: dict[str, int] = field(default_factory=dict)

    @property
    def total_paid(self) -> int:
        return sum(self.payouts.values())


def _check_stake_set(market: Market, stakes: list[Stake]) -> None:
    """Stakes must be exactly the market's stakes: right market, unpaid, and summing to the pools."""
    yes_sum = 0
    no_sum = 0
    seen: set[str] = set()
    for stake in stakes:
        if stake.market_id != market.id:
            raise StakeSetMismatchError(f"stake {stake.id} belongs to market {stake.market_id}")
        if stake.id in seen:
            raise StakeSetMismatchError(f"stake {stake.id} listed twice")
        seen.add(stake.id)
        if stake.is_paid_out:
            raise DuplicateSettlementError(market.id)
        if stake.side == Side.YES:
            yes_sum += stake.amount
        else:
            no_sum += stake.amount
    if yes_sum != market.yes_pool or no_sum != market.no_pool:
        raise StakeSetMismatchError(
            f"stakes sum to ({yes_sum}, {no_sum}) but pools are "
            f"({market.yes_pool}, {market.no_pool})"
        )


def _bettor_totals(stakes: list[Stake], payouts: dict[str, int]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for stake in stakes:
        totals[stake.bettor_id] = totals.get(stake.bettor_id, 0) + payouts[stake.id]
    return totals


def settle(
    market: Market,
    outcome: object,
    stakes: list[Stake],
    fee_bps: int,
    now: datetime,
) -> SettlementResult:
    """Resolve a CLOSED market and assign payouts to ``stakes`` (the market's complete stake set).

    ``stakes`` should be in placement order; it decides who receives leftover
    cents. Raises DuplicateSettlementError, InvalidStateError,
    UnknownOutcomeError, InvalidFeeRateError or StakeSetMismatchError before
    anything is mutated.
    """
    if market.is_final:
        raise DuplicateSettlementError(market.id)
    if market.status != MarketStatus.CLOSED:
        raise InvalidStateError(market.id, market.status.value, "settle")
    try:
        winning_side = parse_side(outcome)
    except ValueError:
        raise UnknownOutcomeError(outcome) from None
    try:
        validate_fee_bps(fee_bps)
    except ValueError:
        raise InvalidFeeRateError(fee_bps) from None
    _check_stake_set(market, stakes)

    winners = [s for s in stakes if s.side == winning_side]
    losers = [s for s in stakes if s.side != winning_side]
    winning_pool = sum(s.amount for s in winners)
    losing_pool = sum(s.amount for s in losers)
    charity_fee = calc_charity_fee(losing_pool, fee_bps)
    prize = losing_pool - charity_fee

    payouts: dict[str, int] = {}
    no_winner_refund = False
    if winning_pool > 0:
        shares = allocate_pro_rata(prize, [(s.id, s.amount) for s in winners])
        for stake in winners:
            payouts[stake.id] = stake.amount + shares[stake.id]
        for stake in losers:
            payouts[stake.id] = 0
    else:
        no_winner_refund = losing_pool > 0
        payouts.update(allocate_pro_rata(prize, [(s.id, s.amount) for s in losers]))

    # all checks passed, mutate
    resolve_market(market, winning_side, now)
    market.charity_contribution = charity_fee
    for stake in stakes:
        stake.payout = payouts[stake.id]
        stake.settled_at = now
    entry = new_entry(market.id, charity_fee, now) if charity_fee > 0 else None

    logger.info(
        "Market settled: market=%s outcome=%s winning_pool=%d losing_pool=%d fee=%d stakes=%d",
        market.id, winning_side.value, winning_pool, losing_pool, charity_fee, len(stakes),
    )
    return SettlementResult(
        market_id=market.id,
        outcome=winning_side,
        winning_pool=winning_pool,
        losing_pool=losing_pool,
        charity_fee=charity_fee,
        payouts=payouts,
        ledger_entry=entry,
        no_winner_refund=no_winner_refund,
        settled_at=now,
        bettor_totals=_bettor_totals(stakes, payouts),
    )


def refund_cancelled(market: Market, stakes: list[Stake], now: datetime) -> SettlementResult:
    """Cancel an OPEN or CLOSED market and refund every stake at face value, fee waived."""
    if market.status == MarketStatus.CANCELLED:
        raise DuplicateSettlementError(market.id)
    if market.status not in (MarketStatus.OPEN, MarketStatus.CLOSED):
        raise InvalidStateError(market.id, market.status.value, "cancel")
    _check_stake_set(market, stakes)

    payouts = {s.id: s.amount for s in stakes}
    cancel_market(market, now)
    for stake in stakes:
        stake.payout = stake.amount
        stake.settled_at = now

    logger.info(
        "Market cancelled: market=%s refunded=%d stakes=%d",
        market.id, market.total_pool, len(stakes),
    )
    return SettlementResult(
        market_id=market.id,
        outcome=None,
        winning_pool=0,
        losing_pool=0,
        charity_fee=0,
        payouts=payouts,
        cancelled=True,
        settled_at=now,
        bettor_totals=_bettor_totals(stakes, payouts),
    )
