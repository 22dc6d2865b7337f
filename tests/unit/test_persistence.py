# tests/unit/test_persistence.py
"""Unit tests for the raw-SQL repositories using a mocked AsyncSession."""
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.wb_betting.domain.models import Stake
from src.wb_betting.infrastructure.persistence import StakeRepository
from src.wb_charity.infrastructure.persistence import CharityRepository
from src.wb_common.enums import CharityStatus, MarketStatus, Side
from src.wb_market.infrastructure.persistence import MarketRepository
from tests.fakes import make_market

_TS = datetime(2026, 6, 1, tzinfo=UTC)


def _make_market_row(**kwargs):
    """Build a mock DB row with all market columns."""
    row = MagicMock()
    row.id = kwargs.get("id", "MKT-1")
    row.title = kwargs.get("title", "Rain")
    row.description = None
    row.city = "Hangzhou"
    row.province = "Zhejiang"
    row.weather_condition = "rain"
    row.crop = None
    row.deadline = _TS
    row.status = kwargs.get("status", "OPEN")
    row.yes_pool = kwargs.get("yes_pool", 0)
    row.no_pool = kwargs.get("no_pool", 0)
    row.outcome = kwargs.get("outcome")
    row.charity_fee_bps = 100
    row.charity_contribution = 0
    row.created_at = _TS
    row.updated_at = _TS
    row.closed_at = None
    row.settled_at = None
    row.cancelled_at = None
    return row


def _db_returning(rows):
    db = MagicMock()
    result = MagicMock()
    result.fetchone.return_value = rows[0] if rows else None
    result.fetchall.return_value = rows
    db.execute = AsyncMock(return_value=result)
    return db


def _sql(db) -> str:
    return str(db.execute.call_args.args[0])


class TestMarketRepository:
    @pytest.mark.asyncio
    async def test_get_by_id_maps_enums(self) -> None:
        db = _db_returning([_make_market_row(status="SETTLED", outcome="NO", no_pool=10)])
        market = await MarketRepository().get_by_id("MKT-1", db)
        assert market is not None
        assert market.status is MarketStatus.SETTLED
        assert market.outcome is Side.NO
        assert market.no_pool == 10

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self) -> None:
        assert await MarketRepository().get_by_id("MKT-X", _db_returning([])) is None

    @pytest.mark.asyncio
    async def test_get_for_update_locks_row(self) -> None:
        db = _db_returning([_make_market_row()])
        await MarketRepository().get_for_update("MKT-1", db)
        assert "FOR UPDATE" in _sql(db)

    @pytest.mark.asyncio
    async def test_list_markets_converts_cursor(self) -> None:
        db = _db_returning([_make_market_row(), _make_market_row(id="MKT-2")])
        markets = await MarketRepository().list_markets(
            "OPEN", _TS.isoformat(), "MKT-9", 21, db
        )
        assert [m.id for m in markets] == ["MKT-1", "MKT-2"]
        params = db.execute.call_args.args[1]
        assert params["cursor_ts"] == _TS
        assert params["limit"] == 21

    @pytest.mark.asyncio
    async def test_update_pools_only_open(self) -> None:
        db = _db_returning([])
        await MarketRepository().update_pools(make_market(yes_pool=5, no_pool=7), db)
        assert "status = 'OPEN'" in _sql(db)
        params = db.execute.call_args.args[1]
        assert (params["yes_pool"], params["no_pool"]) == (5, 7)

    @pytest.mark.asyncio
    async def test_update_status_writes_outcome_value(self) -> None:
        db = _db_returning([])
        m = make_market(status=MarketStatus.SETTLED, outcome=Side.YES, charity_contribution=50)
        await MarketRepository().update_status(m, db)
        params = db.execute.call_args.args[1]
        assert params["status"] == "SETTLED"
        assert params["outcome"] == "YES"
        assert params["charity_contribution"] == 50


def _stake(payout: int | None = None) -> Stake:
    return Stake(
        id="STK-1", market_id="MKT-1", bettor_id="alice", side=Side.YES, amount=100,
        placed_at=_TS, quoted_odds=Decimal("2.0"), quoted_payout=200, payout=payout,
    )


class TestStakeRepository:
    @pytest.mark.asyncio
    async def test_save(self) -> None:
        db = _db_returning([])
        await StakeRepository().save(_stake(), db)
        params = db.execute.call_args.args[1]
        assert params["side"] == "YES"
        assert params["quoted_odds"] == Decimal("2.0")

    @pytest.mark.asyncio
    async def test_list_by_market_maps_rows(self) -> None:
        row = MagicMock()
        row.id, row.market_id, row.bettor_id = "STK-1", "MKT-1", "alice"
        row.side, row.amount, row.placed_at = "NO", 250, _TS
        row.quoted_odds, row.quoted_payout = "1.5000", 375
        row.payout, row.settled_at = None, None
        stakes = await StakeRepository().list_by_market("MKT-1", _db_returning([row]))
        assert stakes[0].side is Side.NO
        assert stakes[0].quoted_odds == Decimal("1.5")

    @pytest.mark.asyncio
    async def test_update_payouts_guarded(self) -> None:
        db = _db_returning([])
        stakes = [_stake(payout=150), _stake(payout=0)]
        await StakeRepository().update_payouts(stakes, db)
        assert db.execute.await_count == 2
        assert "payout IS NULL" in _sql(db)


class TestCharityRepository:
    @pytest.mark.asyncio
    async def test_totals_by_status(self) -> None:
        pending = MagicMock(status="PENDING", total=170)
        done = MagicMock(status="DISTRIBUTED", total=50)
        totals = await CharityRepository().totals_by_status(_db_returning([pending, done]))
        assert totals == {"PENDING": 170, "DISTRIBUTED": 50}

    @pytest.mark.asyncio
    async def test_get_for_update_maps_status(self) -> None:
        row = MagicMock()
        row.id, row.source_market_id, row.amount = "CHR-1", None, 10
        row.status, row.recipient_name, row.recipient_address = "DISTRIBUTED", "x", None
        row.created_at, row.distributed_at = _TS, _TS
        entry = await CharityRepository().get_for_update("CHR-1", _db_returning([row]))
        assert entry is not None
        assert entry.status is CharityStatus.DISTRIBUTED
