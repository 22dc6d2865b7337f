# src/wb_betting/infrastructure/persistence.py
"""StakeRepository — raw SQL persistence implementation.

Stakes are append-only apart from the single payout write at settlement.
"""
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_betting.domain.models import Stake
from src.wb_common.enums import Side

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_STAKE_SQL = text("""
    INSERT INTO stakes (id, market_id, bettor_id, side, amount, placed_at,
        quoted_odds, quoted_payout)
    VALUES (:id, :market_id, :bettor_id, :side, :amount, :placed_at,
        :quoted_odds, :quoted_payout)
""")

# payout IS NULL guard: a stake is paid out exactly once
_UPDATE_PAYOUT_SQL = text("""
    UPDATE stakes
    SET payout = :payout, settled_at = :settled_at
    WHERE id = :id AND payout IS NULL
""")

_SELECT_COLUMNS = """
    id, market_id, bettor_id, side, amount, placed_at,
    quoted_odds, quoted_payout, payout, settled_at
"""

_LIST_BY_MARKET_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM stakes WHERE market_id = :market_id
    ORDER BY placed_at ASC, id ASC
""")

_LIST_BY_BETTOR_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM stakes WHERE bettor_id = :bettor_id
    ORDER BY placed_at DESC, id DESC
    LIMIT :limit
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_stake(row: Any) -> Stake:
    """Convert a DB result row to a Stake domain object."""
    return Stake(
        id=row.id,
        market_id=row.market_id,
        bettor_id=row.bettor_id,
        side=Side(row.side),
        amount=row.amount,
        placed_at=row.placed_at,
        quoted_odds=Decimal(row.quoted_odds),
        quoted_payout=row.quoted_payout,
        payout=row.payout,
        settled_at=row.settled_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class StakeRepository:
    async def save(self, stake: Stake, db: AsyncSession) -> None:
        await db.execute(
            _INSERT_STAKE_SQL,
            {
                "id": stake.id,
                "market_id": stake.market_id,
                "bettor_id": stake.bettor_id,
                "side": stake.side.value,
                "amount": stake.amount,
                "placed_at": stake.placed_at,
                "quoted_odds": stake.quoted_odds,
                "quoted_payout": stake.quoted_payout,
            },
        )

    async def list_by_market(self, market_id: str, db: AsyncSession) -> list[Stake]:
        rows = (await db.execute(_LIST_BY_MARKET_SQL, {"market_id": market_id})).fetchall()
        return [_row_to_stake(r) for r in rows]

    async def list_by_bettor(
        self, bettor_id: str, limit: int, db: AsyncSession
    ) -> list[Stake]:
        rows = (
            await db.execute(_LIST_BY_BETTOR_SQL, {"bettor_id": bettor_id, "limit": limit})
        ).fetchall()
        return [_row_to_stake(r) for r in rows]

    async def update_payouts(self, stakes: list[Stake], db: AsyncSession) -> None:
        for stake in stakes:
            await db.execute(
                _UPDATE_PAYOUT_SQL,
                {"id": stake.id, "payout": stake.payout, "settled_at": stake.settled_at},
            )
