from datetime import datetime

from pydantic import BaseModel, Field

from src.wb_charity.domain.models import CharityLedgerEntry
from src.wb_common.cents import cents_to_display


class CharityEntryResponse(BaseModel):
    id: str
    source_market_id: str | None
    amount_cents: int
    amount_display: str
    status: str
    recipient_name: str | None
    recipient_address: str | None
    created_at: datetime | None
    distributed_at: datetime | None

    @classmethod
    def from_domain(cls, e: CharityLedgerEntry) -> "CharityEntryResponse":
        return cls(
            id=e.id,
            source_market_id=e.source_market_id,
            amount_cents=e.amount,
            amount_display=cents_to_display(e.amount),
            status=e.status.value,
            recipient_name=e.recipient_name,
            recipient_address=e.recipient_address,
            created_at=e.created_at,
            distributed_at=e.distributed_at,
        )


class CharityLedgerResponse(BaseModel):
    items: list[CharityEntryResponse]
    pending_cents: int
    distributed_cents: int
    total_cents: int


class RecordDonationRequest(BaseModel):
    amount_cents: int = Field(gt=0)
    recipient_name: str | None = None
    recipient_address: str | None = None


class DistributeRequest(BaseModel):
    recipient_name: str | None = None
    recipient_address: str | None = None
