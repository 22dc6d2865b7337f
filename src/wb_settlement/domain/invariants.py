"""Conservation checks for markets, stakes and the charity ledger.

INV-1: yes_pool >= 0 and no_pool >= 0
INV-2: yes_pool / no_pool equal the sums of the market's stakes per side
INV-3: SETTLED -> every stake paid, sum(payouts) + charity == yes_pool + no_pool
INV-4: CANCELLED -> every stake refunded at face value, no charity entry
INV-5: charity for a market <= fee_bps * total_staked
INV-6: OPEN / CLOSED -> no stake carries a payout
"""
import logging

from src.wb_betting.domain.models import Stake
from src.wb_charity.domain.ledger import market_charity_cap
from src.wb_charity.domain.models import CharityLedgerEntry
from src.wb_common.enums import MarketStatus, Side
from src.wb_market.domain.models import Market
from src.wb_settlement.domain.settlement import SettlementResult

logger = logging.getLogger(__name__)


def verify_settlement(result: SettlementResult, pool_total: int) -> None:
    """Assert a freshly computed settlement conserves funds. Raises AssertionError if violated."""
    paid = result.total_paid
    assert all(p >= 0 for p in result.payouts.values()), (
        f"negative payout in settlement of {result.market_id}"
    )
    assert paid + result.charity_fee == pool_total, (
        f"INV-3 violated: payouts({paid}) + charity({result.charity_fee}) "
        f"= {paid + result.charity_fee} != pool_total={pool_total}"
    )
    logger.debug(
        "Settlement conserves funds: market=%s paid=%d fee=%d", result.market_id, paid,
        result.charity_fee,
    )


def check_market_invariants(
    market: Market, stakes: list[Stake], entries: list[CharityLedgerEntry]
) -> list[str]:
    """Return violation strings for one market (empty when consistent)."""
    violations: list[str] = []
    mid = market.id

    if market.yes_pool < 0 or market.no_pool < 0:
        violations.append(
            f"INV-1 violated: market={mid} pools=({market.yes_pool}, {market.no_pool})"
        )

    yes_sum = sum(s.amount for s in stakes if s.side == Side.YES)
    no_sum = sum(s.amount for s in stakes if s.side == Side.NO)
    if (yes_sum, no_sum) != (market.yes_pool, market.no_pool):
        violations.append(
            f"INV-2 violated: market={mid} stakes=({yes_sum}, {no_sum}) "
            f"pools=({market.yes_pool}, {market.no_pool})"
        )

    charity = sum(e.amount for e in entries if e.source_market_id == mid)
    if market.status == MarketStatus.SETTLED:
        unpaid = [s.id for s in stakes if not s.is_paid_out]
        if unpaid:
            violations.append(f"INV-3 violated: market={mid} unpaid stakes {unpaid}")
        paid = sum(s.payout or 0 for s in stakes)
        if paid + charity != market.total_pool:
            violations.append(
                f"INV-3 violated: market={mid} payouts({paid}) + charity({charity}) "
                f"!= pool_total({market.total_pool})"
            )
    elif market.status == MarketStatus.CANCELLED:
        wrong = [s.id for s in stakes if s.payout != s.amount]
        if wrong or charity:
            violations.append(
                f"INV-4 violated: market={mid} unrefunded={wrong} charity={charity}"
            )
    else:
        early = [s.id for s in stakes if s.is_paid_out]
        if early:
            violations.append(f"INV-6 violated: market={mid} paid before settlement {early}")

    cap = market_charity_cap(market.total_pool, market.charity_fee_bps)
    if charity > cap:
        violations.append(f"INV-5 violated: market={mid} charity={charity} > cap={cap}")

    for msg in violations:
        logger.error(msg)
    return violations
