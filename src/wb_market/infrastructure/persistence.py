"""MarketRepository — concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_common.enums import MarketStatus, Side
from src.wb_market.domain.models import Market

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, title, description, city, province, weather_condition, crop,
    deadline, status, yes_pool, no_pool, outcome,
    charity_fee_bps, charity_contribution,
    created_at, updated_at, closed_at, settled_at, cancelled_at
"""

_INSERT_MARKET_SQL = text("""
    INSERT INTO markets (id, title, description, city, province, weather_condition, crop,
        deadline, status, yes_pool, no_pool, charity_fee_bps, charity_contribution,
        created_at, updated_at)
    VALUES (:id, :title, :description, :city, :province, :weather_condition, :crop,
        :deadline, :status, 0, 0, :charity_fee_bps, 0, :created_at, :updated_at)
""")

_GET_MARKET_SQL = text(f"SELECT {_SELECT_COLUMNS} FROM markets WHERE id = :market_id")

_GET_MARKET_FOR_UPDATE_SQL = text(
    f"SELECT {_SELECT_COLUMNS} FROM markets WHERE id = :market_id FOR UPDATE"
)

_LIST_MARKETS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM markets
    WHERE
        (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
        AND (
            CAST(:cursor_ts AS TIMESTAMPTZ) IS NULL
            OR created_at < CAST(:cursor_ts AS TIMESTAMPTZ)
            OR (
                created_at = CAST(:cursor_ts AS TIMESTAMPTZ)
                AND id < CAST(:cursor_id AS TEXT)
            )
        )
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_LIST_EXPIRED_OPEN_SQL = text("""
    SELECT id FROM markets
    WHERE status = 'OPEN' AND deadline < :now
    ORDER BY deadline ASC
""")

_UPDATE_POOLS_SQL = text("""
    UPDATE markets
    SET yes_pool = :yes_pool, no_pool = :no_pool, updated_at = :updated_at
    WHERE id = :id AND status = 'OPEN'
""")

_UPDATE_STATUS_SQL = text("""
    UPDATE markets
    SET status = :status, outcome = :outcome,
        charity_contribution = :charity_contribution,
        closed_at = :closed_at, settled_at = :settled_at, cancelled_at = :cancelled_at,
        updated_at = :updated_at
    WHERE id = :id
""")

_UPDATE_DETAILS_SQL = text("""
    UPDATE markets
    SET title = :title, description = :description, city = :city,
        province = :province, weather_condition = :weather_condition, crop = :crop,
        deadline = :deadline, updated_at = :updated_at
    WHERE id = :id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_market(row: Any) -> Market:
    return Market(
        id=row.id,
        title=row.title,
        description=row.description,
        city=row.city,
        province=row.province,
        weather_condition=row.weather_condition,
        crop=row.crop,
        deadline=row.deadline,
        status=MarketStatus(row.status),
        yes_pool=row.yes_pool,
        no_pool=row.no_pool,
        outcome=Side(row.outcome) if row.outcome else None,
        charity_fee_bps=row.charity_fee_bps,
        charity_contribution=row.charity_contribution,
        created_at=row.created_at,
        updated_at=row.updated_at,
        closed_at=row.closed_at,
        settled_at=row.settled_at,
        cancelled_at=row.cancelled_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MarketRepository:
    async def create(self, market: Market, db: AsyncSession) -> None:
        await db.execute(
            _INSERT_MARKET_SQL,
            {
                "id": market.id,
                "title": market.title,
                "description": market.description,
                "city": market.city,
                "province": market.province,
                "weather_condition": market.weather_condition,
                "crop": market.crop,
                "deadline": market.deadline,
                "status": market.status.value,
                "charity_fee_bps": market.charity_fee_bps,
                "created_at": market.created_at,
                "updated_at": market.updated_at,
            },
        )

    async def get_by_id(self, market_id: str, db: AsyncSession) -> Market | None:
        row = (await db.execute(_GET_MARKET_SQL, {"market_id": market_id})).fetchone()
        return _row_to_market(row) if row else None

    async def get_for_update(self, market_id: str, db: AsyncSession) -> Market | None:
        """Row-locked read; the lock is held until the caller's transaction ends."""
        row = (
            await db.execute(_GET_MARKET_FOR_UPDATE_SQL, {"market_id": market_id})
        ).fetchone()
        return _row_to_market(row) if row else None

    async def list_markets(
        self,
        status: str | None,
        cursor_ts: str | None,
        cursor_id: str | None,
        limit: int,
        db: AsyncSession,
    ) -> list[Market]:
        # asyncpg requires a real datetime object for TIMESTAMPTZ parameters,
        # not an ISO string.
        cursor_ts_dt: datetime | None = None
        if cursor_ts is not None:
            cursor_ts_dt = datetime.fromisoformat(cursor_ts)

        result = await db.execute(
            _LIST_MARKETS_SQL,
            {
                "status": status,
                "cursor_ts": cursor_ts_dt,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_market(row) for row in result.fetchall()]

    async def list_expired_open(self, now: datetime, db: AsyncSession) -> list[str]:
        rows = (await db.execute(_LIST_EXPIRED_OPEN_SQL, {"now": now})).fetchall()
        return [row.id for row in rows]

    async def update_pools(self, market: Market, db: AsyncSession) -> None:
        await db.execute(
            _UPDATE_POOLS_SQL,
            {
                "id": market.id,
                "yes_pool": market.yes_pool,
                "no_pool": market.no_pool,
                "updated_at": market.updated_at,
            },
        )

    async def update_status(self, market: Market, db: AsyncSession) -> None:
        await db.execute(
            _UPDATE_STATUS_SQL,
            {
                "id": market.id,
                "status": market.status.value,
                "outcome": market.outcome.value if market.outcome else None,
                "charity_contribution": market.charity_contribution,
                "closed_at": market.closed_at,
                "settled_at": market.settled_at,
                "cancelled_at": market.cancelled_at,
                "updated_at": market.updated_at,
            },
        )

    async def update_details(self, market: Market, db: AsyncSession) -> None:
        await db.execute(
            _UPDATE_DETAILS_SQL,
            {
                "id": market.id,
                "title": market.title,
                "description": market.description,
                "city": market.city,
                "province": market.province,
                "weather_condition": market.weather_condition,
                "crop": market.crop,
                "deadline": market.deadline,
                "updated_at": market.updated_at,
            },
        )
