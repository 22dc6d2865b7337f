"""Tests for CharityApplicationService."""
import pytest

from src.wb_charity.application.schemas import DistributeRequest, RecordDonationRequest
from src.wb_charity.application.service import CharityApplicationService
from src.wb_charity.domain.ledger import new_entry
from src.wb_common.errors import CharityAlreadyDistributedError, CharityEntryNotFoundError
from tests.fakes import NOW, FakeCharityRepo, FakeSession, FixedClock


@pytest.fixture
def service(charity_repo: FakeCharityRepo, clock: FixedClock) -> CharityApplicationService:
    return CharityApplicationService(repo=charity_repo, clock=clock)


@pytest.mark.asyncio
async def test_ledger_totals(
    service: CharityApplicationService, charity_repo: FakeCharityRepo, db: FakeSession
) -> None:
    await charity_repo.append(new_entry("MKT-1", 50, NOW), db)
    await charity_repo.append(new_entry("MKT-2", 120, NOW), db)
    ledger = await service.get_ledger(None, 100, db)
    assert len(ledger.items) == 2
    assert ledger.pending_cents == 170
    assert ledger.distributed_cents == 0
    assert ledger.total_cents == 170


@pytest.mark.asyncio
async def test_record_donation(
    service: CharityApplicationService, charity_repo: FakeCharityRepo, db: FakeSession
) -> None:
    resp = await service.record_donation(
        RecordDonationRequest(amount_cents=10000, recipient_name="Village School"), db
    )
    assert resp.source_market_id is None
    assert resp.amount_display == "$100.00"
    assert resp.status == "PENDING"
    assert resp.id in charity_repo.rows
    db.commit.assert_awaited_once()


def test_donation_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RecordDonationRequest(amount_cents=0)


@pytest.mark.asyncio
async def test_distribute(
    service: CharityApplicationService, charity_repo: FakeCharityRepo, db: FakeSession
) -> None:
    entry = new_entry("MKT-1", 50, NOW)
    await charity_repo.append(entry, db)
    resp = await service.distribute(
        entry.id, DistributeRequest(recipient_name="Flood Relief", recipient_address="0xdef"), db
    )
    assert resp.status == "DISTRIBUTED"
    assert resp.distributed_at == NOW
    ledger = await service.get_ledger("DISTRIBUTED", 100, db)
    assert [i.id for i in ledger.items] == [entry.id]
    assert ledger.distributed_cents == 50

    with pytest.raises(CharityAlreadyDistributedError):
        await service.distribute(entry.id, DistributeRequest(), db)


@pytest.mark.asyncio
async def test_distribute_unknown(service: CharityApplicationService, db: FakeSession) -> None:
    with pytest.raises(CharityEntryNotFoundError):
        await service.distribute("CHR-X", DistributeRequest(), db)
