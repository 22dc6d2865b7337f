# src/wb_betting/application/service.py
"""BettingApplicationService — quote, stake placement and bettor history.

Commits after each successful write and only then publishes the realtime
event. The bettor id comes from the identity collaborator (JWT subject).
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.wb_betting.application.schemas import (
    BettorHistoryResponse,
    MarketStakesResponse,
    PlaceStakeRequest,
    PlaceStakeResponse,
    QuoteResponse,
    StakeResponse,
)
from src.wb_betting.domain.models import Stake, stake_status
from src.wb_betting.domain.repository import StakeRepositoryProtocol
from src.wb_betting.engine.engine import BettingEngine
from src.wb_betting.infrastructure.events import MarketEventPublisher, pool_updated_event
from src.wb_betting.infrastructure.persistence import StakeRepository
from src.wb_charity.infrastructure.persistence import CharityRepository
from src.wb_common.enums import StakeStatus
from src.wb_common.errors import MarketNotFoundError
from src.wb_market.domain.models import Market
from src.wb_market.domain.repository import MarketRepositoryProtocol
from src.wb_market.infrastructure.persistence import MarketRepository
from src.wb_pricing.domain.pricing import PricingPolicy

logger = logging.getLogger(__name__)

_engine: BettingEngine | None = None


def get_betting_engine() -> BettingEngine:
    """Process-wide engine: the per-market locks only work if everyone shares them."""
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = BettingEngine(
            market_repo=MarketRepository(),
            stake_repo=StakeRepository(),
            charity_repo=CharityRepository(),
            pricing=PricingPolicy(settings.DEFAULT_ODDS),
            max_stake=settings.MAX_STAKE_CENTS,
        )
    return _engine


class BettingApplicationService:
    def __init__(
        self,
        engine: BettingEngine | None = None,
        stake_repo: StakeRepositoryProtocol | None = None,
        market_repo: MarketRepositoryProtocol | None = None,
        publisher: MarketEventPublisher | None = None,
    ) -> None:
        self._engine = engine
        self._stakes: StakeRepositoryProtocol = stake_repo or StakeRepository()
        self._markets: MarketRepositoryProtocol = market_repo or MarketRepository()
        self._publisher = publisher or MarketEventPublisher()

    @property
    def engine(self) -> BettingEngine:
        return self._engine or get_betting_engine()

    async def quote(
        self, market_id: str, side: str, amount: int, db: AsyncSession
    ) -> QuoteResponse:
        q = await self.engine.quote(market_id, side, amount, db)
        return QuoteResponse.from_domain(q)

    async def place_stake(
        self, req: PlaceStakeRequest, bettor_id: str, db: AsyncSession
    ) -> PlaceStakeResponse:
        market, stake = await self.engine.place_stake(
            req.market_id, bettor_id, req.side, req.amount_cents, db
        )
        await db.commit()
        if req.transfer_ref:
            logger.info("Stake %s funded by transfer %s", stake.id, req.transfer_ref)
        await self._publisher.publish(market.id, pool_updated_event(market, stake))
        return PlaceStakeResponse(
            stake=_to_response(stake, market),
            yes_pool_cents=market.yes_pool,
            no_pool_cents=market.no_pool,
        )

    async def get_history(
        self, bettor_id: str, limit: int, db: AsyncSession
    ) -> BettorHistoryResponse:
        stakes = await self._stakes.list_by_bettor(bettor_id, limit, db)
        markets = await self._load_markets({s.market_id for s in stakes}, db)

        items: list[StakeResponse] = []
        pending = returned = settled_staked = won = lost = 0
        for stake in stakes:
            status = stake_status(stake, markets.get(stake.market_id))
            items.append(StakeResponse.from_domain(stake, status.value))
            if stake.payout is None:
                pending += stake.amount
                continue
            returned += stake.payout
            settled_staked += stake.amount
            if status == StakeStatus.WON:
                won += 1
            elif status == StakeStatus.LOST:
                lost += 1

        return BettorHistoryResponse(
            bettor_id=bettor_id,
            items=items,
            total_staked_cents=sum(s.amount for s in stakes),
            pending_cents=pending,
            returned_cents=returned,
            won_count=won,
            lost_count=lost,
            net_cents=returned - settled_staked,
        )

    async def list_market_stakes(self, market_id: str, db: AsyncSession) -> MarketStakesResponse:
        market = await self._markets.get_by_id(market_id, db)
        if market is None:
            raise MarketNotFoundError(market_id)
        stakes = await self._stakes.list_by_market(market_id, db)
        return MarketStakesResponse(
            market_id=market_id,
            items=[_to_response(s, market) for s in stakes],
            total_cents=sum(s.amount for s in stakes),
        )

    async def _load_markets(self, market_ids: set[str], db: AsyncSession) -> dict[str, Market]:
        markets: dict[str, Market] = {}
        for market_id in sorted(market_ids):
            market = await self._markets.get_by_id(market_id, db)
            if market is not None:
                markets[market_id] = market
        return markets


def _to_response(stake: Stake, market: Market) -> StakeResponse:
    return StakeResponse.from_domain(stake, stake_status(stake, market).value)
