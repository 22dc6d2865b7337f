"""HTTP-level tests: routing, auth, envelope and error mapping."""
from collections.abc import AsyncGenerator, Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import AsyncClient

from src.main import app
from src.wb_common.database import get_db_session
from src.wb_common.errors import MarketNotFoundError
from src.wb_gateway.auth.jwt_handler import create_access_token
from src.wb_market.application.schemas import MarketDetail
from tests.fakes import FakeSession, make_market


async def _fake_db() -> AsyncGenerator[FakeSession, None]:
    yield FakeSession()


@pytest.fixture(autouse=True)
def override_db() -> Iterator[None]:
    app.dependency_overrides[get_db_session] = _fake_db
    yield
    app.dependency_overrides.clear()


def _auth(role: str = "bettor") -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token('0xabc', role=role)}"}


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_get_market_envelope(client: AsyncClient) -> None:
    detail = MarketDetail.from_domain(make_market(yes_pool=100))
    with patch(
        "src.wb_market.api.router._service.get_market", AsyncMock(return_value=detail)
    ):
        resp = await client.get("/api/v1/markets/MKT-1")
    body = resp.json()
    assert resp.status_code == 200
    assert body["code"] == 0
    assert body["data"]["id"] == "MKT-1"
    assert body["request_id"] == resp.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_app_error_mapped(client: AsyncClient) -> None:
    with patch(
        "src.wb_market.api.router._service.get_market",
        AsyncMock(side_effect=MarketNotFoundError("MKT-X")),
    ):
        resp = await client.get("/api/v1/markets/MKT-X")
    body = resp.json()
    assert resp.status_code == 404
    assert body["code"] == 3001
    assert body["data"] == {"kind": "MARKET_NOT_FOUND"}


@pytest.mark.asyncio
async def test_place_stake_requires_token(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/stakes", json={"market_id": "MKT-1", "side": "YES", "amount_cents": 100}
    )
    assert resp.status_code == 401
    assert resp.json()["data"]["kind"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_place_stake_uses_token_subject(client: AsyncClient) -> None:
    placed = MagicMock()
    placed.model_dump.return_value = {"yes_pool_cents": 100}
    mock = AsyncMock(return_value=placed)
    with patch("src.wb_betting.api.router._service.place_stake", mock):
        resp = await client.post(
            "/api/v1/stakes",
            json={"market_id": "MKT-1", "side": "YES", "amount_cents": 100},
            headers=_auth(),
        )
    assert resp.status_code == 201
    assert resp.json()["data"] == {"yes_pool_cents": 100}
    req, bettor_id, _ = mock.await_args.args
    assert bettor_id == "0xabc"
    assert req.amount_cents == 100


@pytest.mark.asyncio
async def test_invalid_side_rejected(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/stakes",
        json={"market_id": "MKT-1", "side": "MAYBE", "amount_cents": 100},
        headers=_auth(),
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_admin_routes_require_admin(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/admin/markets/MKT-1/resolve", json={"outcome": "YES"}, headers=_auth()
    )
    assert resp.status_code == 403
    assert resp.json()["code"] == 1006
