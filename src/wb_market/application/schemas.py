"""Pydantic schemas for wb_market API requests and responses.

Cursor format for markets (VARCHAR PK, not sequential):
  {"ts": "<created_at ISO>", "id": "<market_id>"}
  Encoded as Base64 JSON string.
"""

import base64
import binascii
import json
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.wb_common.cents import cents_to_display, ratio
from src.wb_market.domain.models import Market

# ---------------------------------------------------------------------------
# Cursor utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_market: Market) -> str:
    """Encode composite cursor from last market in page."""
    payload = {
        "ts": last_market.created_at.isoformat() if last_market.created_at else None,
        "id": last_market.id,
    }
    return base64.b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[str | None, str | None]:
    """Decode composite cursor -> (ts_iso, market_id), or (None, None) on malformed input."""
    if cursor is None:
        return None, None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        ts, market_id = data["ts"], data["id"]
        datetime.fromisoformat(ts)
        if not isinstance(market_id, str):
            return None, None
        return ts, market_id
    except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError):
        return None, None


def _percentages(m: Market) -> tuple[Decimal, Decimal]:
    """Share of the pool on each side; 50/50 for an empty market."""
    if m.total_pool == 0:
        half = Decimal("0.5000")
        return half, half
    yes = ratio(m.yes_pool, m.total_pool)
    return yes, Decimal(1) - yes


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    deadline: datetime
    description: str | None = None
    city: str | None = None
    province: str | None = None
    weather_condition: str | None = None
    crop: str | None = None
    charity_fee_bps: int | None = Field(default=None, ge=0, lt=10000)


class UpdateMarketRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    deadline: datetime | None = None
    description: str | None = None
    city: str | None = None
    province: str | None = None
    weather_condition: str | None = None
    crop: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class MarketListItem(BaseModel):
    id: str
    title: str
    city: str | None
    province: str | None
    weather_condition: str | None
    status: str
    deadline: str
    yes_pool_cents: int
    no_pool_cents: int
    total_pool_display: str
    yes_percentage: Decimal
    no_percentage: Decimal

    @classmethod
    def from_domain(cls, m: Market) -> "MarketListItem":
        yes_pct, no_pct = _percentages(m)
        return cls(
            id=m.id,
            title=m.title,
            city=m.city,
            province=m.province,
            weather_condition=m.weather_condition,
            status=m.status.value,
            deadline=m.deadline.isoformat(),
            yes_pool_cents=m.yes_pool,
            no_pool_cents=m.no_pool,
            total_pool_display=cents_to_display(m.total_pool),
            yes_percentage=yes_pct,
            no_percentage=no_pct,
        )


class MarketListResponse(BaseModel):
    items: list[MarketListItem]
    next_cursor: str | None
    has_more: bool


class MarketDetail(BaseModel):
    id: str
    title: str
    description: str | None
    city: str | None
    province: str | None
    weather_condition: str | None
    crop: str | None
    status: str
    deadline: str
    yes_pool_cents: int
    no_pool_cents: int
    total_pool_cents: int
    total_pool_display: str
    yes_percentage: Decimal
    no_percentage: Decimal
    outcome: str | None
    charity_fee_bps: int
    charity_contribution_cents: int
    charity_contribution_display: str
    created_at: str | None
    closed_at: str | None
    settled_at: str | None
    cancelled_at: str | None

    @classmethod
    def from_domain(cls, m: Market) -> "MarketDetail":
        def _iso(dt: datetime | None) -> str | None:
            return dt.isoformat() if dt is not None else None

        yes_pct, no_pct = _percentages(m)
        return cls(
            id=m.id,
            title=m.title,
            description=m.description,
            city=m.city,
            province=m.province,
            weather_condition=m.weather_condition,
            crop=m.crop,
            status=m.status.value,
            deadline=m.deadline.isoformat(),
            yes_pool_cents=m.yes_pool,
            no_pool_cents=m.no_pool,
            total_pool_cents=m.total_pool,
            total_pool_display=cents_to_display(m.total_pool),
            yes_percentage=yes_pct,
            no_percentage=no_pct,
            outcome=m.outcome.value if m.outcome else None,
            charity_fee_bps=m.charity_fee_bps,
            charity_contribution_cents=m.charity_contribution,
            charity_contribution_display=cents_to_display(m.charity_contribution),
            created_at=_iso(m.created_at),
            closed_at=_iso(m.closed_at),
            settled_at=_iso(m.settled_at),
            cancelled_at=_iso(m.cancelled_at),
        )
