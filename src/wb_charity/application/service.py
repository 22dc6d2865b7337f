"""CharityApplicationService — ledger listing, manual donations, distribution."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_charity.application.schemas import (
    CharityEntryResponse,
    CharityLedgerResponse,
    DistributeRequest,
    RecordDonationRequest,
)
from src.wb_charity.domain.ledger import distribute, new_entry
from src.wb_charity.domain.repository import CharityRepositoryProtocol
from src.wb_charity.infrastructure.persistence import CharityRepository
from src.wb_common.datetime_utils import Clock, SystemClock
from src.wb_common.enums import CharityStatus
from src.wb_common.errors import CharityEntryNotFoundError

logger = logging.getLogger(__name__)


class CharityApplicationService:
    def __init__(
        self, repo: CharityRepositoryProtocol | None = None, clock: Clock | None = None
    ) -> None:
        self._repo: CharityRepositoryProtocol = repo or CharityRepository()
        self._clock: Clock = clock or SystemClock()

    async def get_ledger(
        self, status: str | None, limit: int, db: AsyncSession
    ) -> CharityLedgerResponse:
        entries = await self._repo.list_entries(status, limit, db)
        totals = await self._repo.totals_by_status(db)
        pending = totals.get(CharityStatus.PENDING.value, 0)
        distributed = totals.get(CharityStatus.DISTRIBUTED.value, 0)
        return CharityLedgerResponse(
            items=[CharityEntryResponse.from_domain(e) for e in entries],
            pending_cents=pending,
            distributed_cents=distributed,
            total_cents=pending + distributed,
        )

    async def record_donation(
        self, req: RecordDonationRequest, db: AsyncSession
    ) -> CharityEntryResponse:
        """Manual entry not tied to any market (e.g. an off-platform gift)."""
        entry = new_entry(None, req.amount_cents, self._clock.now())
        entry.recipient_name = req.recipient_name
        entry.recipient_address = req.recipient_address
        await self._repo.append(entry, db)
        await db.commit()
        logger.info("Manual charity entry recorded: id=%s amount=%d", entry.id, entry.amount)
        return CharityEntryResponse.from_domain(entry)

    async def distribute(
        self, entry_id: str, req: DistributeRequest, db: AsyncSession
    ) -> CharityEntryResponse:
        entry = await self._repo.get_for_update(entry_id, db)
        if entry is None:
            raise CharityEntryNotFoundError(entry_id)
        distribute(entry, req.recipient_name, req.recipient_address, self._clock.now())
        await self._repo.mark_distributed(entry, db)
        await db.commit()
        logger.info(
            "Charity distributed: id=%s amount=%d recipient=%s",
            entry.id, entry.amount, entry.recipient_name,
        )
        return CharityEntryResponse.from_domain(entry)
