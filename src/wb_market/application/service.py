"""MarketApplicationService — thin composition layer.

All methods are read-only; no commit/rollback needed.
The caller (router) passes db session; service delegates to repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_common.enums import MarketStatus
from src.wb_common.errors import MarketNotFoundError
from src.wb_market.application.schemas import (
    MarketDetail,
    MarketListItem,
    MarketListResponse,
    cursor_decode,
    cursor_encode,
)
from src.wb_market.domain.repository import MarketRepositoryProtocol
from src.wb_market.infrastructure.persistence import MarketRepository


class MarketApplicationService:
    def __init__(self, repo: MarketRepositoryProtocol | None = None) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()

    async def list_markets(
        self,
        status: str | None,
        cursor: str | None,
        limit: int,
        db: AsyncSession,
    ) -> MarketListResponse:
        # status=None → default OPEN; status='ALL' → no filter
        sql_status = None if status == "ALL" else (status or MarketStatus.OPEN.value)
        cursor_ts, cursor_id = cursor_decode(cursor)

        # Fetch limit+1 to detect has_more without COUNT(*)
        markets = await self._repo.list_markets(sql_status, cursor_ts, cursor_id, limit + 1, db)
        has_more = len(markets) > limit
        page = markets[:limit]

        items = [MarketListItem.from_domain(m) for m in page]
        next_cursor = cursor_encode(page[-1]) if has_more and page else None
        return MarketListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def get_market(self, market_id: str, db: AsyncSession) -> MarketDetail:
        market = await self._repo.get_by_id(market_id, db)
        if market is None:
            raise MarketNotFoundError(market_id)
        return MarketDetail.from_domain(market)
