"""Tests for conservation checks."""
from decimal import Decimal

import pytest

from src.wb_betting.domain.models import Stake
from src.wb_charity.domain.models import CharityLedgerEntry
from src.wb_common.enums import MarketStatus, Side
from src.wb_settlement.domain.invariants import check_market_invariants, verify_settlement
from src.wb_settlement.domain.settlement import SettlementResult
from tests.fakes import NOW, make_market


def _stake(stake_id: str, side: Side, amount: int, payout: int | None = None) -> Stake:
    return Stake(
        id=stake_id, market_id="MKT-1", bettor_id="alice", side=side, amount=amount,
        placed_at=NOW, quoted_odds=Decimal("2.0"), quoted_payout=amount * 2, payout=payout,
    )


def _entry(amount: int) -> CharityLedgerEntry:
    return CharityLedgerEntry(id="CHR-1", source_market_id="MKT-1", amount=amount)


class TestVerifySettlement:
    def test_balanced(self) -> None:
        result = SettlementResult("MKT-1", Side.YES, 100, 50, 1, {"a": 149, "b": 0})
        verify_settlement(result, 150)

    def test_unbalanced(self) -> None:
        result = SettlementResult("MKT-1", Side.YES, 100, 50, 1, {"a": 150, "b": 0})
        with pytest.raises(AssertionError, match="INV-3"):
            verify_settlement(result, 150)

    def test_negative_payout(self) -> None:
        result = SettlementResult("MKT-1", Side.YES, 100, 50, 0, {"a": 151, "b": -1})
        with pytest.raises(AssertionError):
            verify_settlement(result, 150)


class TestCheckMarketInvariants:
    def test_open_market_consistent(self) -> None:
        m = make_market(yes_pool=100, no_pool=50)
        stakes = [_stake("s1", Side.YES, 100), _stake("s2", Side.NO, 50)]
        assert check_market_invariants(m, stakes, []) == []

    def test_pool_mismatch(self) -> None:
        m = make_market(yes_pool=120, no_pool=50)
        stakes = [_stake("s1", Side.YES, 100), _stake("s2", Side.NO, 50)]
        violations = check_market_invariants(m, stakes, [])
        assert len(violations) == 1
        assert violations[0].startswith("INV-2")

    def test_negative_pool(self) -> None:
        violations = check_market_invariants(make_market(yes_pool=-1), [], [])
        assert any(v.startswith("INV-1") for v in violations)

    def test_settled_consistent(self) -> None:
        m = make_market(
            status=MarketStatus.SETTLED, outcome=Side.YES, yes_pool=10000, no_pool=5000,
            charity_contribution=50,
        )
        stakes = [_stake("s1", Side.YES, 10000, 14950), _stake("s2", Side.NO, 5000, 0)]
        assert check_market_invariants(m, stakes, [_entry(50)]) == []

    def test_settled_missing_charity(self) -> None:
        m = make_market(status=MarketStatus.SETTLED, outcome=Side.YES, yes_pool=10000, no_pool=5000)
        stakes = [_stake("s1", Side.YES, 10000, 14950), _stake("s2", Side.NO, 5000, 0)]
        violations = check_market_invariants(m, stakes, [])
        assert any(v.startswith("INV-3") for v in violations)

    def test_settled_unpaid_stake(self) -> None:
        m = make_market(status=MarketStatus.SETTLED, outcome=Side.YES, yes_pool=100)
        violations = check_market_invariants(m, [_stake("s1", Side.YES, 100)], [])
        assert any("unpaid" in v for v in violations)

    def test_cancelled_must_refund_face_value(self) -> None:
        m = make_market(status=MarketStatus.CANCELLED, yes_pool=100)
        assert check_market_invariants(m, [_stake("s1", Side.YES, 100, 100)], []) == []
        violations = check_market_invariants(m, [_stake("s1", Side.YES, 100, 90)], [])
        assert any(v.startswith("INV-4") for v in violations)

    def test_charity_cap(self) -> None:
        m = make_market(
            status=MarketStatus.SETTLED, outcome=Side.YES, yes_pool=100, no_pool=100,
        )
        stakes = [_stake("s1", Side.YES, 100, 100), _stake("s2", Side.NO, 100, 0)]
        violations = check_market_invariants(m, stakes, [_entry(100)])
        assert any(v.startswith("INV-5") for v in violations)

    def test_payout_before_settlement(self) -> None:
        m = make_market(status=MarketStatus.CLOSED, yes_pool=100)
        violations = check_market_invariants(m, [_stake("s1", Side.YES, 100, 100)], [])
        assert any(v.startswith("INV-6") for v in violations)
