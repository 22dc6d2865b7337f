"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.wb_admin.api.router import router as admin_router
from src.wb_betting.api.router import router as stake_router
from src.wb_charity.api.router import router as charity_router
from src.wb_common.database import engine
from src.wb_common.errors import AppError, InternalError
from src.wb_common.redis_client import close_redis, get_redis
from src.wb_common.response import error_response
from src.wb_gateway.middleware.request_log import RequestLogMiddleware
from src.wb_market.api.router import router as market_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: configure logging, verify DB + Redis connections. Shutdown: dispose."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
    logger.info("%s started", settings.APP_NAME)
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(
        exc.code, exc.message, exc.kind, getattr(request.state, "request_id", None)
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    err = InternalError()
    resp = error_response(
        err.code, err.message, err.kind, getattr(request.state, "request_id", None)
    )
    return JSONResponse(status_code=err.http_status, content=resp.model_dump())


app.include_router(market_router, prefix="/api/v1")
app.include_router(stake_router, prefix="/api/v1")
app.include_router(charity_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
