# src/wb_admin/api/router.py
"""Admin REST API. Every route requires role=admin."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.wb_admin.application.schemas import ResolveRequest
from src.wb_admin.application.service import AdminService
from src.wb_common.database import get_db_session
from src.wb_common.response import ApiResponse, success_response
from src.wb_gateway.auth.dependencies import require_admin
from src.wb_market.application.schemas import CreateMarketRequest, UpdateMarketRequest

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()

AdminId = Annotated[str, Depends(require_admin)]
Db = Annotated[AsyncSession, Depends(get_db_session)]


def _rid(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.post("/markets", status_code=201)
async def create_market(
    body: CreateMarketRequest, request: Request, admin_id: AdminId, db: Db
) -> ApiResponse:
    result = await _service.create_market(body, db)
    return success_response(result.model_dump(), _rid(request))


@router.patch("/markets/{market_id}")
async def update_market(
    market_id: str, body: UpdateMarketRequest, request: Request, admin_id: AdminId, db: Db
) -> ApiResponse:
    result = await _service.update_market(market_id, body, db)
    return success_response(result.model_dump(), _rid(request))


@router.post("/markets/close-expired")
async def close_expired(request: Request, admin_id: AdminId, db: Db) -> ApiResponse:
    closed = await _service.close_expired_markets(db)
    return success_response({"closed": closed}, _rid(request))


@router.post("/markets/{market_id}/close")
async def close_market(
    market_id: str, request: Request, admin_id: AdminId, db: Db
) -> ApiResponse:
    result = await _service.close_market(market_id, db)
    return success_response(result.model_dump(), _rid(request))


@router.post("/markets/{market_id}/resolve")
async def resolve_market(
    market_id: str, body: ResolveRequest, request: Request, admin_id: AdminId, db: Db
) -> ApiResponse:
    result = await _service.resolve_market(market_id, body.outcome, db)
    return success_response(result.model_dump(), _rid(request))


@router.post("/markets/{market_id}/cancel")
async def cancel_market(
    market_id: str, request: Request, admin_id: AdminId, db: Db
) -> ApiResponse:
    result = await _service.cancel_market(market_id, db)
    return success_response(result.model_dump(), _rid(request))


@router.get("/markets/{market_id}/stats")
async def market_stats(
    market_id: str, request: Request, admin_id: AdminId, db: Db
) -> ApiResponse:
    result = await _service.get_market_stats(market_id, db)
    return success_response(result.model_dump(), _rid(request))


@router.post("/verify-invariants")
async def verify_invariants(request: Request, admin_id: AdminId, db: Db) -> ApiResponse:
    result = await _service.verify_all_invariants(db)
    return success_response(result.model_dump(), _rid(request))
