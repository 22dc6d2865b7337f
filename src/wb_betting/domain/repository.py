# src/wb_betting/domain/repository.py
"""StakeRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_betting.domain.models import Stake


class StakeRepositoryProtocol(Protocol):
    async def save(self, stake: Stake, db: AsyncSession) -> None: ...

    async def list_by_market(self, market_id: str, db: AsyncSession) -> list[Stake]: ...

    async def list_by_bettor(
        self, bettor_id: str, limit: int, db: AsyncSession
    ) -> list[Stake]: ...

    async def update_payouts(self, stakes: list[Stake], db: AsyncSession) -> None: ...
