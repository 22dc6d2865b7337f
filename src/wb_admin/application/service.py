# src/wb_admin/application/service.py
"""Admin application service — market lifecycle, settlement and audits."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.wb_admin.application.schemas import (
    InvariantReport,
    MarketStatsResponse,
    SettlementResponse,
)
from src.wb_betting.application.service import get_betting_engine
from src.wb_betting.domain.repository import StakeRepositoryProtocol
from src.wb_betting.engine.engine import BettingEngine
from src.wb_betting.infrastructure.events import MarketEventPublisher, market_finalized_event
from src.wb_betting.infrastructure.persistence import StakeRepository
from src.wb_charity.domain.repository import CharityRepositoryProtocol
from src.wb_charity.infrastructure.persistence import CharityRepository
from src.wb_common.datetime_utils import Clock, SystemClock, ensure_utc
from src.wb_common.enums import MarketStatus
from src.wb_common.errors import InvalidDeadlineError, InvalidStateError, MarketNotFoundError
from src.wb_common.id_generator import generate_id
from src.wb_market.application.schemas import (
    CreateMarketRequest,
    MarketDetail,
    UpdateMarketRequest,
)
from src.wb_market.domain.models import Market
from src.wb_market.domain.repository import MarketRepositoryProtocol
from src.wb_market.infrastructure.persistence import MarketRepository
from src.wb_settlement.domain.invariants import check_market_invariants

logger = logging.getLogger(__name__)

_AUDIT_PAGE_SIZE = 200


class AdminService:
    def __init__(
        self,
        engine: BettingEngine | None = None,
        market_repo: MarketRepositoryProtocol | None = None,
        stake_repo: StakeRepositoryProtocol | None = None,
        charity_repo: CharityRepositoryProtocol | None = None,
        publisher: MarketEventPublisher | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._engine = engine
        self._markets: MarketRepositoryProtocol = market_repo or MarketRepository()
        self._stakes: StakeRepositoryProtocol = stake_repo or StakeRepository()
        self._charity: CharityRepositoryProtocol = charity_repo or CharityRepository()
        self._publisher = publisher or MarketEventPublisher()
        self._clock: Clock = clock or SystemClock()

    @property
    def engine(self) -> BettingEngine:
        return self._engine or get_betting_engine()

    # ------------------------------------------------------------------
    # Market CRUD
    # ------------------------------------------------------------------

    async def create_market(self, req: CreateMarketRequest, db: AsyncSession) -> MarketDetail:
        now = self._clock.now()
        deadline = ensure_utc(req.deadline)
        if deadline <= now:
            raise InvalidDeadlineError("deadline must be in the future")
        fee_bps = req.charity_fee_bps
        market = Market(
            id=generate_id("MKT-"),
            title=req.title,
            deadline=deadline,
            description=req.description,
            city=req.city,
            province=req.province,
            weather_condition=req.weather_condition,
            crop=req.crop,
            charity_fee_bps=settings.CHARITY_FEE_BPS if fee_bps is None else fee_bps,
            created_at=now,
            updated_at=now,
        )
        await self._markets.create(market, db)
        await db.commit()
        logger.info("Market created: id=%s title=%r deadline=%s", market.id, market.title, deadline)
        return MarketDetail.from_domain(market)

    async def update_market(
        self, market_id: str, req: UpdateMarketRequest, db: AsyncSession
    ) -> MarketDetail:
        """Edit descriptive fields and the deadline of an OPEN market. Pools are never editable."""
        market = await self._markets.get_for_update(market_id, db)
        if market is None:
            raise MarketNotFoundError(market_id)
        if market.status != MarketStatus.OPEN:
            raise InvalidStateError(market_id, market.status.value, "update")

        now = self._clock.now()
        changes = req.model_dump(exclude_unset=True)
        if changes.get("deadline") is not None:
            deadline = ensure_utc(changes["deadline"])
            if deadline <= now:
                raise InvalidDeadlineError("deadline must be in the future")
            changes["deadline"] = deadline
        for name, value in changes.items():
            if value is None and name in ("title", "deadline"):
                continue  # required columns cannot be cleared
            setattr(market, name, value)
        market.updated_at = now

        await self._markets.update_details(market, db)
        await db.commit()
        return MarketDetail.from_domain(market)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close_market(self, market_id: str, db: AsyncSession) -> MarketDetail:
        market = await self.engine.close_market(market_id, db)
        await db.commit()
        return MarketDetail.from_domain(market)

    async def close_expired_markets(self, db: AsyncSession) -> list[str]:
        closed = await self.engine.close_expired_markets(db)
        await db.commit()
        return closed

    async def resolve_market(
        self, market_id: str, outcome: str, db: AsyncSession
    ) -> SettlementResponse:
        market, result = await self.engine.settle_market(market_id, outcome, db)
        await db.commit()
        await self._publisher.publish(market_id, market_finalized_event(market, result))
        return SettlementResponse.from_domain(market, result)

    async def cancel_market(self, market_id: str, db: AsyncSession) -> SettlementResponse:
        market, result = await self.engine.cancel_market(market_id, db)
        await db.commit()
        await self._publisher.publish(market_id, market_finalized_event(market, result))
        return SettlementResponse.from_domain(market, result)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    async def get_market_stats(self, market_id: str, db: AsyncSession) -> MarketStatsResponse:
        market = await self._markets.get_by_id(market_id, db)
        if market is None:
            raise MarketNotFoundError(market_id)
        stakes = await self._stakes.list_by_market(market_id, db)
        entries = await self._charity.list_by_market(market_id, db)
        return MarketStatsResponse(
            market_id=market_id,
            status=market.status.value,
            stake_count=len(stakes),
            unique_bettors=len({s.bettor_id for s in stakes}),
            yes_pool_cents=market.yes_pool,
            no_pool_cents=market.no_pool,
            largest_stake_cents=max((s.amount for s in stakes), default=0),
            charity_cents=sum(e.amount for e in entries),
        )

    async def verify_all_invariants(self, db: AsyncSession) -> InvariantReport:
        """Run the per-market conservation checks over every market."""
        violations: list[str] = []
        checked = 0
        cursor_ts: str | None = None
        cursor_id: str | None = None
        while True:
            page = await self._markets.list_markets(
                None, cursor_ts, cursor_id, _AUDIT_PAGE_SIZE, db
            )
            for market in page:
                stakes = await self._stakes.list_by_market(market.id, db)
                entries = await self._charity.list_by_market(market.id, db)
                violations.extend(check_market_invariants(market, stakes, entries))
                checked += 1
            if len(page) < _AUDIT_PAGE_SIZE:
                break
            last = page[-1]
            cursor_ts = last.created_at.isoformat() if last.created_at else None
            cursor_id = last.id
            if cursor_ts is None:
                break
        if violations:
            logger.error("Invariant audit found %d violations", len(violations))
        return InvariantReport(ok=not violations, markets_checked=checked, violations=violations)
