"""wb_market REST endpoints.

GET /markets                        — list with cursor pagination
GET /markets/{market_id}            — full detail with pool shares
GET /markets/{market_id}/quote      — indicative odds for a prospective stake
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_betting.application.service import BettingApplicationService
from src.wb_common.database import get_db_session
from src.wb_common.response import ApiResponse, success_response
from src.wb_market.application.service import MarketApplicationService

router = APIRouter(prefix="/markets", tags=["markets"])

_service = MarketApplicationService()
_betting = BettingApplicationService()


@router.get("")
async def list_markets(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(
        None, description="Filter by status. Default: OPEN. Use ALL for no filter."
    ),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await _service.list_markets(status, cursor, limit, db)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))


@router.get("/{market_id}")
async def get_market(
    market_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_market(market_id, db)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))


@router.get("/{market_id}/quote")
async def get_quote(
    market_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    side: Literal["YES", "NO"] = Query(...),
    amount_cents: int = Query(..., gt=0),
) -> ApiResponse:
    result = await _betting.quote(market_id, side, amount_cents, db)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))
