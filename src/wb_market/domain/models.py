"""Domain models for wb_market — plain dataclasses; transitions live in state.py."""

from dataclasses import dataclass
from datetime import datetime

from src.wb_common.enums import MarketStatus, Side


@dataclass(frozen=True)
class PoolSnapshot:
    """Consistent read of both pools, taken under the market lock."""

    yes_pool: int
    no_pool: int

    @property
    def total(self) -> int:
        return self.yes_pool + self.no_pool

    def side_pool(self, side: Side) -> int:
        return self.yes_pool if side == Side.YES else self.no_pool


@dataclass
class Market:
    id: str
    title: str
    deadline: datetime
    status: MarketStatus = MarketStatus.OPEN
    yes_pool: int = 0                 # cents staked on YES
    no_pool: int = 0                  # cents staked on NO
    outcome: Side | None = None       # set once SETTLED
    charity_fee_bps: int = 100
    charity_contribution: int = 0     # cents, fee recorded at settlement
    description: str | None = None
    city: str | None = None
    province: str | None = None
    weather_condition: str | None = None
    crop: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    settled_at: datetime | None = None
    cancelled_at: datetime | None = None

    @property
    def total_pool(self) -> int:
        return self.yes_pool + self.no_pool

    @property
    def is_open(self) -> bool:
        return self.status == MarketStatus.OPEN

    @property
    def is_final(self) -> bool:
        return self.status in (MarketStatus.SETTLED, MarketStatus.CANCELLED)

    def side_pool(self, side: Side) -> int:
        return self.yes_pool if side == Side.YES else self.no_pool

    def pool_snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(yes_pool=self.yes_pool, no_pool=self.no_pool)
