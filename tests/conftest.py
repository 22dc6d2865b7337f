"""Shared test fixtures."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key")

from decimal import Decimal  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402
from src.wb_betting.engine.engine import BettingEngine  # noqa: E402
from src.wb_pricing.domain.pricing import PricingPolicy  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeCharityRepo,
    FakeMarketRepo,
    FakeSession,
    FakeStakeRepo,
    FixedClock,
)


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def db() -> FakeSession:
    return FakeSession()


@pytest.fixture
def market_repo() -> FakeMarketRepo:
    return FakeMarketRepo()


@pytest.fixture
def stake_repo() -> FakeStakeRepo:
    return FakeStakeRepo()


@pytest.fixture
def charity_repo() -> FakeCharityRepo:
    return FakeCharityRepo()


@pytest.fixture
def betting_engine(
    market_repo: FakeMarketRepo,
    stake_repo: FakeStakeRepo,
    charity_repo: FakeCharityRepo,
    clock: FixedClock,
) -> BettingEngine:
    return BettingEngine(
        market_repo=market_repo,
        stake_repo=stake_repo,
        charity_repo=charity_repo,
        pricing=PricingPolicy(Decimal("2.0")),
        clock=clock,
        max_stake=10_000_000,
    )


@pytest.fixture
def publisher() -> AsyncMock:
    pub = AsyncMock()
    pub.publish.return_value = True
    return pub
