"""BettingEngine — stateful orchestrator for per-market stake placement and settlement.

Mutations to one market are serialized twice over: an asyncio.Lock per
market id inside this process, and a row lock (SELECT ... FOR UPDATE) on the
market inside the caller's transaction for other processes. Each mutating
call runs in a savepoint, so a failure leaves neither pool nor stakes
half-written. Different markets never share a lock.
"""
import asyncio
import logging
import weakref

from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_betting.domain.models import Stake
from src.wb_betting.domain.placement import place_stake
from src.wb_betting.domain.repository import StakeRepositoryProtocol
from src.wb_charity.domain.repository import CharityRepositoryProtocol
from src.wb_common.datetime_utils import Clock, SystemClock
from src.wb_common.errors import DeadlinePassedError, MarketNotFoundError
from src.wb_market.domain.models import Market
from src.wb_market.domain.repository import MarketRepositoryProtocol
from src.wb_market.domain.state import close_if_expired, close_market, deadline_passed
from src.wb_pricing.domain.pricing import PricingPolicy, Quote
from src.wb_settlement.domain.invariants import verify_settlement
from src.wb_settlement.domain.settlement import SettlementResult, refund_cancelled, settle

logger = logging.getLogger(__name__)


class BettingEngine:
    def __init__(
        self,
        market_repo: MarketRepositoryProtocol,
        stake_repo: StakeRepositoryProtocol,
        charity_repo: CharityRepositoryProtocol,
        pricing: PricingPolicy,
        clock: Clock | None = None,
        max_stake: int | None = None,
    ) -> None:
        self._markets = market_repo
        self._stakes = stake_repo
        self._charity = charity_repo
        self._pricing = pricing
        self._clock: Clock = clock or SystemClock()
        self._max_stake = max_stake
        # entries vanish once no coroutine holds or awaits the lock
        self._market_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _get_or_create_lock(self, market_id: str) -> asyncio.Lock:
        lock = self._market_locks.get(market_id)
        if lock is None:
            lock = asyncio.Lock()
            self._market_locks[market_id] = lock
        return lock

    async def _load_for_update(self, market_id: str, db: AsyncSession) -> Market:
        market = await self._markets.get_for_update(market_id, db)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    async def quote(
        self, market_id: str, side: object, amount: int, db: AsyncSession
    ) -> Quote:
        """Quote from one row read; both pools come from the same snapshot."""
        market = await self._markets.get_by_id(market_id, db)
        if market is None:
            raise MarketNotFoundError(market_id)
        quote = self._pricing.quote(market, side, amount)
        if deadline_passed(market, self._clock.now()):
            raise DeadlinePassedError(market_id)
        return quote

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    async def place_stake(
        self,
        market_id: str,
        bettor_id: str,
        side: object,
        amount: int,
        db: AsyncSession,
    ) -> tuple[Market, Stake]:
        """Record a stake whose funds the transfer collaborator has already received."""
        async with self._get_or_create_lock(market_id):
            async with db.begin_nested():
                market = await self._load_for_update(market_id, db)
                stake = place_stake(
                    market, bettor_id, side, amount, self._clock.now(),
                    self._pricing, self._max_stake,
                )
                await self._stakes.save(stake, db)
                await self._markets.update_pools(market, db)
        logger.info(
            "Stake accepted: market=%s stake=%s bettor=%s side=%s amount=%d",
            market_id, stake.id, bettor_id, stake.side.value, amount,
        )
        return market, stake

    async def close_market(self, market_id: str, db: AsyncSession) -> Market:
        async with self._get_or_create_lock(market_id):
            async with db.begin_nested():
                market = await self._load_for_update(market_id, db)
                close_market(market, self._clock.now())
                await self._markets.update_status(market, db)
        logger.info("Market closed: market=%s", market_id)
        return market

    async def close_expired_markets(self, db: AsyncSession) -> list[str]:
        """Close every OPEN market whose deadline has passed. Returns closed ids."""
        now = self._clock.now()
        closed: list[str] = []
        for market_id in await self._markets.list_expired_open(now, db):
            async with self._get_or_create_lock(market_id):
                async with db.begin_nested():
                    market = await self._load_for_update(market_id, db)
                    if close_if_expired(market, now):
                        await self._markets.update_status(market, db)
                        closed.append(market_id)
        if closed:
            logger.info("Closed %d expired markets: %s", len(closed), closed)
        return closed

    async def settle_market(
        self, market_id: str, outcome: object, db: AsyncSession
    ) -> tuple[Market, SettlementResult]:
        """Resolve a market; an OPEN market past its deadline is closed first."""
        async with self._get_or_create_lock(market_id):
            async with db.begin_nested():
                market = await self._load_for_update(market_id, db)
                now = self._clock.now()
                close_if_expired(market, now)
                stakes = await self._stakes.list_by_market(market_id, db)
                result = settle(market, outcome, stakes, market.charity_fee_bps, now)
                verify_settlement(result, market.total_pool)
                await self._stakes.update_payouts(stakes, db)
                if result.ledger_entry is not None:
                    await self._charity.append(result.ledger_entry, db)
                await self._markets.update_status(market, db)
        return market, result

    async def cancel_market(
        self, market_id: str, db: AsyncSession
    ) -> tuple[Market, SettlementResult]:
        async with self._get_or_create_lock(market_id):
            async with db.begin_nested():
                market = await self._load_for_update(market_id, db)
                stakes = await self._stakes.list_by_market(market_id, db)
                result = refund_cancelled(market, stakes, self._clock.now())
                verify_settlement(result, market.total_pool)
                await self._stakes.update_payouts(stakes, db)
                await self._markets.update_status(market, db)
        return market, result
