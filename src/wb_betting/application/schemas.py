# src/wb_betting/application/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, field_validator

from src.wb_betting.domain.models import Stake
from src.wb_common.cents import cents_to_display
from src.wb_pricing.domain.pricing import Quote


class PlaceStakeRequest(BaseModel):
    market_id: str
    side: Literal["YES", "NO"]
    amount_cents: int
    # Reference of the confirmed transfer (e.g. tx hash); recorded in logs only
    transfer_ref: str | None = None

    @field_validator("market_id")
    @classmethod
    def no_whitespace(cls, v: str) -> str:
        if not v or v != v.strip() or " " in v:
            raise ValueError("market_id must not contain whitespace")
        return v


class QuoteResponse(BaseModel):
    market_id: str
    side: str
    amount_cents: int
    odds: Decimal
    potential_payout_cents: int
    potential_payout_display: str
    side_percentage_before: Decimal
    yes_pool_cents: int
    no_pool_cents: int

    @classmethod
    def from_domain(cls, q: Quote) -> "QuoteResponse":
        return cls(
            market_id=q.market_id,
            side=q.side.value,
            amount_cents=q.amount,
            odds=q.odds,
            potential_payout_cents=q.potential_payout,
            potential_payout_display=cents_to_display(q.potential_payout),
            side_percentage_before=q.side_percentage_before,
            yes_pool_cents=q.pools.yes_pool,
            no_pool_cents=q.pools.no_pool,
        )


class StakeResponse(BaseModel):
    id: str
    market_id: str
    bettor_id: str
    side: str
    amount_cents: int
    quoted_odds: Decimal
    quoted_payout_cents: int
    payout_cents: int | None
    status: str
    placed_at: datetime
    settled_at: datetime | None = None

    @classmethod
    def from_domain(cls, s: Stake, status: str) -> "StakeResponse":
        return cls(
            id=s.id,
            market_id=s.market_id,
            bettor_id=s.bettor_id,
            side=s.side.value,
            amount_cents=s.amount,
            quoted_odds=s.quoted_odds,
            quoted_payout_cents=s.quoted_payout,
            payout_cents=s.payout,
            status=status,
            placed_at=s.placed_at,
            settled_at=s.settled_at,
        )


class PlaceStakeResponse(BaseModel):
    stake: StakeResponse
    yes_pool_cents: int
    no_pool_cents: int


class BettorHistoryResponse(BaseModel):
    """A bettor's stakes, newest first, with running totals."""

    bettor_id: str
    items: list[StakeResponse]
    total_staked_cents: int
    pending_cents: int       # staked on markets not yet finalized
    returned_cents: int      # payouts received (wins + refunds)
    won_count: int
    lost_count: int
    net_cents: int           # returned - staked on finalized markets


class MarketStakesResponse(BaseModel):
    market_id: str
    items: list[StakeResponse]
    total_cents: int
