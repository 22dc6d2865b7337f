"""wb_charity REST endpoints.

GET  /charity                        — public ledger with totals
POST /charity                        — record a manual donation (admin)
POST /charity/{entry_id}/distribute  — mark an entry paid out (admin)
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_charity.application.schemas import DistributeRequest, RecordDonationRequest
from src.wb_charity.application.service import CharityApplicationService
from src.wb_common.database import get_db_session
from src.wb_common.response import ApiResponse, success_response
from src.wb_gateway.auth.dependencies import require_admin

router = APIRouter(prefix="/charity", tags=["charity"])

_service = CharityApplicationService()


@router.get("")
async def get_ledger(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: Literal["PENDING", "DISTRIBUTED"] | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    result = await _service.get_ledger(status, limit, db)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))


@router.post("", status_code=201)
async def record_donation(
    body: RecordDonationRequest,
    request: Request,
    admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.record_donation(body, db)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))


@router.post("/{entry_id}/distribute")
async def distribute(
    entry_id: str,
    body: DistributeRequest,
    request: Request,
    admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.distribute(entry_id, body, db)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))
