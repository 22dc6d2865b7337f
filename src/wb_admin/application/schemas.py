from typing import Literal

from pydantic import BaseModel

from src.wb_market.domain.models import Market
from src.wb_settlement.domain.settlement import SettlementResult


class ResolveRequest(BaseModel):
    outcome: Literal["YES", "NO"]


class SettlementResponse(BaseModel):
    market_id: str
    status: str
    outcome: str | None
    winning_pool_cents: int
    losing_pool_cents: int
    charity_fee_cents: int
    total_paid_cents: int
    stake_count: int
    no_winner_refund: bool
    charity_entry_id: str | None
    payouts: dict[str, int]           # stake_id -> cents
    bettor_totals: dict[str, int]     # bettor_id -> cents, for the payout collaborator

    @classmethod
    def from_domain(cls, market: Market, r: SettlementResult) -> "SettlementResponse":
        return cls(
            market_id=r.market_id,
            status=market.status.value,
            outcome=r.outcome.value if r.outcome else None,
            winning_pool_cents=r.winning_pool,
            losing_pool_cents=r.losing_pool,
            charity_fee_cents=r.charity_fee,
            total_paid_cents=r.total_paid,
            stake_count=len(r.payouts),
            no_winner_refund=r.no_winner_refund,
            charity_entry_id=r.ledger_entry.id if r.ledger_entry else None,
            payouts=r.payouts,
            bettor_totals=r.bettor_totals,
        )


class MarketStatsResponse(BaseModel):
    market_id: str
    status: str
    stake_count: int
    unique_bettors: int
    yes_pool_cents: int
    no_pool_cents: int
    largest_stake_cents: int
    charity_cents: int


class InvariantReport(BaseModel):
    ok: bool
    markets_checked: int
    violations: list[str]
