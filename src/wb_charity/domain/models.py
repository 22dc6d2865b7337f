"""Charity ledger domain model — pure dataclass."""
from dataclasses import dataclass
from datetime import datetime

from src.wb_common.enums import CharityStatus


@dataclass
class CharityLedgerEntry:
    id: str
    source_market_id: str | None   # None for manual donations
    amount: int                     # cents
    status: CharityStatus = CharityStatus.PENDING
    recipient_name: str | None = None
    recipient_address: str | None = None
    created_at: datetime | None = None
    distributed_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == CharityStatus.PENDING
