# src/wb_market/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_market.domain.models import Market


class MarketRepositoryProtocol(Protocol):
    async def create(self, market: Market, db: AsyncSession) -> None: ...

    async def get_by_id(self, market_id: str, db: AsyncSession) -> Market | None: ...

    async def get_for_update(self, market_id: str, db: AsyncSession) -> Market | None: ...

    async def list_markets(
        self,
        status: str | None,
        cursor_ts: str | None,
        cursor_id: str | None,
        limit: int,
        db: AsyncSession,
    ) -> list[Market]: ...

    async def list_expired_open(self, now: datetime, db: AsyncSession) -> list[str]: ...

    async def update_pools(self, market: Market, db: AsyncSession) -> None: ...

    async def update_status(self, market: Market, db: AsyncSession) -> None: ...

    async def update_details(self, market: Market, db: AsyncSession) -> None: ...
