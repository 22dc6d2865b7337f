"""CharityRepository — raw SQL over the append-only charity_ledger table."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_charity.domain.models import CharityLedgerEntry
from src.wb_common.enums import CharityStatus

_SELECT_COLUMNS = """
    id, source_market_id, amount, status, recipient_name, recipient_address,
    created_at, distributed_at
"""

_INSERT_ENTRY_SQL = text("""
    INSERT INTO charity_ledger (id, source_market_id, amount, status,
        recipient_name, recipient_address, created_at)
    VALUES (:id, :source_market_id, :amount, :status,
        :recipient_name, :recipient_address, :created_at)
""")

_GET_FOR_UPDATE_SQL = text(
    f"SELECT {_SELECT_COLUMNS} FROM charity_ledger WHERE id = :id FOR UPDATE"
)

_LIST_ENTRIES_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM charity_ledger
    WHERE CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT)
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_LIST_BY_MARKET_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM charity_ledger WHERE source_market_id = :market_id
    ORDER BY created_at ASC
""")

_MARK_DISTRIBUTED_SQL = text("""
    UPDATE charity_ledger
    SET status = 'DISTRIBUTED', distributed_at = :distributed_at,
        recipient_name = :recipient_name, recipient_address = :recipient_address
    WHERE id = :id AND status = 'PENDING'
""")

_TOTALS_SQL = text("""
    SELECT status, COALESCE(SUM(amount), 0) AS total
    FROM charity_ledger
    GROUP BY status
""")


def _row_to_entry(row: Any) -> CharityLedgerEntry:
    return CharityLedgerEntry(
        id=row.id,
        source_market_id=row.source_market_id,
        amount=row.amount,
        status=CharityStatus(row.status),
        recipient_name=row.recipient_name,
        recipient_address=row.recipient_address,
        created_at=row.created_at,
        distributed_at=row.distributed_at,
    )


class CharityRepository:
    async def append(self, entry: CharityLedgerEntry, db: AsyncSession) -> None:
        await db.execute(
            _INSERT_ENTRY_SQL,
            {
                "id": entry.id,
                "source_market_id": entry.source_market_id,
                "amount": entry.amount,
                "status": entry.status.value,
                "recipient_name": entry.recipient_name,
                "recipient_address": entry.recipient_address,
                "created_at": entry.created_at,
            },
        )

    async def get_for_update(
        self, entry_id: str, db: AsyncSession
    ) -> CharityLedgerEntry | None:
        row = (await db.execute(_GET_FOR_UPDATE_SQL, {"id": entry_id})).fetchone()
        return _row_to_entry(row) if row else None

    async def list_entries(
        self, status: str | None, limit: int, db: AsyncSession
    ) -> list[CharityLedgerEntry]:
        rows = (
            await db.execute(_LIST_ENTRIES_SQL, {"status": status, "limit": limit})
        ).fetchall()
        return [_row_to_entry(r) for r in rows]

    async def list_by_market(
        self, market_id: str, db: AsyncSession
    ) -> list[CharityLedgerEntry]:
        rows = (await db.execute(_LIST_BY_MARKET_SQL, {"market_id": market_id})).fetchall()
        return [_row_to_entry(r) for r in rows]

    async def mark_distributed(self, entry: CharityLedgerEntry, db: AsyncSession) -> None:
        await db.execute(
            _MARK_DISTRIBUTED_SQL,
            {
                "id": entry.id,
                "distributed_at": entry.distributed_at,
                "recipient_name": entry.recipient_name,
                "recipient_address": entry.recipient_address,
            },
        )

    async def totals_by_status(self, db: AsyncSession) -> dict[str, int]:
        totals = {s.value: 0 for s in CharityStatus}
        for row in (await db.execute(_TOTALS_SQL)).fetchall():
            totals[row.status] = int(row.total)
        return totals
