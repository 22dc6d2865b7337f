"""CharityRepository Protocol."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_charity.domain.models import CharityLedgerEntry


class CharityRepositoryProtocol(Protocol):
    async def append(self, entry: CharityLedgerEntry, db: AsyncSession) -> None: ...

    async def get_for_update(
        self, entry_id: str, db: AsyncSession
    ) -> CharityLedgerEntry | None: ...

    async def list_entries(
        self, status: str | None, limit: int, db: AsyncSession
    ) -> list[CharityLedgerEntry]: ...

    async def list_by_market(
        self, market_id: str, db: AsyncSession
    ) -> list[CharityLedgerEntry]: ...

    async def mark_distributed(self, entry: CharityLedgerEntry, db: AsyncSession) -> None: ...

    async def totals_by_status(self, db: AsyncSession) -> dict[str, int]: ...
