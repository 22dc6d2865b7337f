"""Tests for pari-mutuel quoting."""
from decimal import Decimal

import pytest

from src.wb_common.enums import MarketStatus, Side
from src.wb_common.errors import MarketClosedError, StakeNotPositiveError, UnknownOutcomeError
from src.wb_pricing.domain.pricing import PricingPolicy
from tests.fakes import make_market


@pytest.fixture
def pricing() -> PricingPolicy:
    return PricingPolicy(Decimal("2.0"))


class TestEmptyMarket:
    def test_default_odds(self, pricing: PricingPolicy) -> None:
        q = pricing.quote(make_market(), "YES", 10000)
        assert q.odds == Decimal("2.0")
        assert q.potential_payout == 20000
        assert q.side_percentage_before == Decimal("0.5")

    def test_custom_default_odds(self) -> None:
        q = PricingPolicy(Decimal("1.5")).quote(make_market(), "NO", 333)
        assert q.odds == Decimal("1.5")
        assert q.potential_payout == 499

    def test_default_odds_below_one_rejected(self) -> None:
        with pytest.raises(ValueError):
            PricingPolicy(Decimal("0.9"))


class TestPoolOdds:
    def test_stake_on_empty_side(self, pricing: PricingPolicy) -> None:
        # YES already holds 10000; NO 5000 -> total_after 15000 / side_after 5000
        q = pricing.quote(make_market(yes_pool=10000), "NO", 5000)
        assert q.odds == Decimal("3.0000")
        assert q.potential_payout == 15000
        assert q.side_percentage_before == Decimal("0")

    def test_stake_on_popular_side(self, pricing: PricingPolicy) -> None:
        # 20000 / 15000 = 1.3333
        q = pricing.quote(make_market(yes_pool=10000, no_pool=5000), "NO", 10000)
        assert q.odds == Decimal("1.3333")
        assert q.potential_payout == 10000 * 25000 // 15000
        assert q.side_percentage_before == Decimal("0.3333")

    def test_same_side_only_market_quotes_one(self, pricing: PricingPolicy) -> None:
        q = pricing.quote(make_market(yes_pool=10000), "YES", 10000)
        assert q.odds == Decimal("1.0000")
        assert q.potential_payout == 10000

    def test_odds_never_below_one(self, pricing: PricingPolicy) -> None:
        for yes, no, amount in [(1, 1, 1), (999, 1, 7), (5, 123456, 1), (10**9, 1, 1)]:
            q = pricing.quote(make_market(yes_pool=yes, no_pool=no), "YES", amount)
            assert q.odds >= 1
            assert q.potential_payout >= amount

    def test_quote_is_read_only(self, pricing: PricingPolicy) -> None:
        m = make_market(yes_pool=100, no_pool=200)
        pricing.quote(m, Side.YES, 50)
        assert (m.yes_pool, m.no_pool) == (100, 200)

    def test_quote_records_pools(self, pricing: PricingPolicy) -> None:
        q = pricing.quote(make_market(yes_pool=100, no_pool=200), "yes", 50)
        assert q.side is Side.YES
        assert (q.pools.yes_pool, q.pools.no_pool) == (100, 200)


class TestRejections:
    def test_unknown_side(self, pricing: PricingPolicy) -> None:
        with pytest.raises(UnknownOutcomeError):
            pricing.quote(make_market(), "MAYBE", 100)

    @pytest.mark.parametrize(
        "status", [MarketStatus.CLOSED, MarketStatus.SETTLED, MarketStatus.CANCELLED]
    )
    def test_not_open(self, pricing: PricingPolicy, status: MarketStatus) -> None:
        with pytest.raises(MarketClosedError):
            pricing.quote(make_market(status=status), "YES", 100)

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive_amount(self, pricing: PricingPolicy, amount: int) -> None:
        with pytest.raises(StakeNotPositiveError):
            pricing.quote(make_market(), "YES", amount)
