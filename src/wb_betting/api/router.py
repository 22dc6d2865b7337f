"""wb_betting REST endpoints.

POST /stakes                        — place a stake (bettor)
GET  /stakes/me                     — own stake history with totals
GET  /markets/{market_id}/stakes    — every stake on a market (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_betting.application.schemas import PlaceStakeRequest
from src.wb_betting.application.service import BettingApplicationService
from src.wb_common.database import get_db_session
from src.wb_common.response import ApiResponse, success_response
from src.wb_gateway.auth.dependencies import get_current_bettor, require_admin

router = APIRouter(tags=["stakes"])

_service = BettingApplicationService()


@router.post("/stakes", status_code=201)
async def place_stake(
    body: PlaceStakeRequest,
    request: Request,
    bettor_id: Annotated[str, Depends(get_current_bettor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.place_stake(body, bettor_id, db)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))


@router.get("/stakes/me")
async def my_stakes(
    request: Request,
    bettor_id: Annotated[str, Depends(get_current_bettor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    result = await _service.get_history(bettor_id, limit, db)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))


@router.get("/markets/{market_id}/stakes")
async def market_stakes(
    market_id: str,
    request: Request,
    admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_market_stakes(market_id, db)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))
