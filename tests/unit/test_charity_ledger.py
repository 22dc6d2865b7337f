"""Tests for charity ledger rules."""
import pytest

from src.wb_charity.domain.ledger import distribute, market_charity_cap, new_entry
from src.wb_common.enums import CharityStatus
from src.wb_common.errors import CharityAlreadyDistributedError
from tests.fakes import NOW


def test_new_entry_is_pending() -> None:
    entry = new_entry("MKT-1", 50, NOW)
    assert entry.id.startswith("CHR-")
    assert entry.status == CharityStatus.PENDING
    assert entry.is_pending
    assert entry.created_at == NOW


@pytest.mark.parametrize("amount", [0, -10])
def test_new_entry_rejects_non_positive(amount: int) -> None:
    with pytest.raises(ValueError):
        new_entry("MKT-1", amount, NOW)


def test_market_charity_cap() -> None:
    assert market_charity_cap(15000, 100) == 150
    assert market_charity_cap(0, 100) == 0


def test_distribute() -> None:
    entry = new_entry(None, 500, NOW)
    distribute(entry, "Rural Water Fund", "0xabc", NOW)
    assert entry.status == CharityStatus.DISTRIBUTED
    assert entry.distributed_at == NOW
    assert entry.recipient_name == "Rural Water Fund"
    assert entry.recipient_address == "0xabc"


def test_distribute_keeps_existing_recipient() -> None:
    entry = new_entry(None, 500, NOW)
    entry.recipient_name = "Seed Bank"
    distribute(entry, None, None, NOW)
    assert entry.recipient_name == "Seed Bank"


def test_distribute_twice() -> None:
    entry = new_entry(None, 500, NOW)
    distribute(entry, None, None, NOW)
    with pytest.raises(CharityAlreadyDistributedError):
        distribute(entry, None, None, NOW)

