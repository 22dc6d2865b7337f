"""Pari-mutuel pricing — quotes include the caller's own hypothetical stake.

For a stake of ``amount`` on ``side``:

    side_after  = side_pool + amount
    total_after = yes_pool + no_pool + amount
    odds        = total_after / side_after          (>= 1.0)
    payout      = amount * total_after // side_after

Quoting after adding the stake means the quoted odds are achievable: if no
one else bets before settlement (and ignoring the charity fee), a winning
stake returns exactly ``payout``. A market with no stake at all would quote
1.0 against itself, so it quotes ``default_odds`` instead.
"""

from dataclasses import dataclass
from decimal import Decimal

from src.wb_common.cents import ratio, scale_cents
from src.wb_common.enums import Side, parse_side
from src.wb_common.errors import MarketClosedError, StakeNotPositiveError, UnknownOutcomeError
from src.wb_market.domain.models import Market, PoolSnapshot

_HALF = Decimal("0.5000")


@dataclass(frozen=True)
class Quote:
    market_id: str
    side: Side
    amount: int                     # cents
    odds: Decimal                   # decimal odds, 4 dp, rounded down
    potential_payout: int           # cents, principal included
    side_percentage_before: Decimal  # share of the pool already on ``side``, 0..1
    pools: PoolSnapshot             # pools the quote was computed from


class PricingPolicy:
    def __init__(self, default_odds: Decimal = Decimal("2.0")) -> None:
        if default_odds < 1:
            raise ValueError(f"default_odds must be >= 1.0, got {default_odds}")
        self.default_odds = default_odds

    def quote(self, market: Market, side: object, amount: int) -> Quote:
        """Price ``amount`` on ``side`` against the current pools. Read-only."""
        try:
            side = parse_side(side)
        except ValueError:
            raise UnknownOutcomeError(side) from None
        if not market.is_open:
            raise MarketClosedError(market.id, market.status.value)
        if amount <= 0:
            raise StakeNotPositiveError(amount)
        return self.quote_snapshot(market.id, market.pool_snapshot(), side, amount)

    def quote_snapshot(
        self, market_id: str, pools: PoolSnapshot, side: Side, amount: int
    ) -> Quote:
        side_before = pools.side_pool(side)
        total_before = pools.total

        if total_before == 0:
            odds = self.default_odds
            payout = scale_cents(amount, odds)
            share = _HALF
        else:
            side_after = side_before + amount
            total_after = total_before + amount
            odds = ratio(total_after, side_after)
            payout = amount * total_after // side_after
            share = ratio(side_before, total_before)

        return Quote(
            market_id=market_id,
            side=side,
            amount=amount,
            odds=odds,
            potential_payout=payout,
            side_percentage_before=share,
            pools=pools,
        )
