"""Charity ledger rules: entry creation, the per-market cap, distribution."""

from datetime import datetime

from src.wb_charity.domain.models import CharityLedgerEntry
from src.wb_common.cents import calc_charity_fee
from src.wb_common.enums import CharityStatus
from src.wb_common.errors import CharityAlreadyDistributedError
from src.wb_common.id_generator import generate_id


def new_entry(source_market_id: str | None, amount: int, now: datetime) -> CharityLedgerEntry:
    if amount <= 0:
        raise ValueError(f"Charity entry amount must be positive, got {amount}")
    return CharityLedgerEntry(
        id=generate_id("CHR-"),
        source_market_id=source_market_id,
        amount=amount,
        status=CharityStatus.PENDING,
        created_at=now,
    )


def market_charity_cap(total_staked: int, fee_bps: int) -> int:
    """Most a market may ever contribute: fee_bps of everything staked on it."""
    return calc_charity_fee(total_staked, fee_bps)


def distribute(
    entry: CharityLedgerEntry,
    recipient_name: str | None,
    recipient_address: str | None,
    now: datetime,
) -> None:
    """PENDING -> DISTRIBUTED. Recipient fields are kept if not supplied."""
    if not entry.is_pending:
        raise CharityAlreadyDistributedError(entry.id)
    entry.status = CharityStatus.DISTRIBUTED
    entry.distributed_at = now
    if recipient_name is not None:
        entry.recipient_name = recipient_name
    if recipient_address is not None:
        entry.recipient_address = recipient_address

