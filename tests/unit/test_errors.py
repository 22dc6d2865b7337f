"""Tests for AppError hierarchy and the response envelope."""
from src.wb_common.errors import (
    AdminRequiredError,
    AppError,
    DeadlinePassedError,
    DuplicateSettlementError,
    InternalError,
    InvalidCredentialsError,
    InvalidStateError,
    MarketClosedError,
    MarketNotFoundError,
    StakeLimitExceededError,
    StakeNotPositiveError,
    UnknownOutcomeError,
)
from src.wb_common.response import error_response, success_response


def test_app_error_defaults() -> None:
    err = AppError(9999, "boom")
    assert err.code == 9999
    assert err.http_status == 500
    assert err.kind == "APP_ERROR"
    assert str(err) == "boom"


def test_market_not_found() -> None:
    err = MarketNotFoundError("MKT-1")
    assert err.code == 3001
    assert err.http_status == 404
    assert err.kind == "MARKET_NOT_FOUND"
    assert "MKT-1" in err.message


def test_market_closed_includes_status() -> None:
    err = MarketClosedError("MKT-1", "SETTLED")
    assert err.code == 3002
    assert err.kind == "MARKET_CLOSED"
    assert "SETTLED" in err.message


def test_deadline_passed() -> None:
    err = DeadlinePassedError("MKT-1")
    assert (err.code, err.http_status, err.kind) == (3003, 422, "DEADLINE_PASSED")


def test_invalid_state() -> None:
    err = InvalidStateError("MKT-1", "OPEN", "resolve")
    assert err.http_status == 409
    assert "Cannot resolve" in err.message


def test_unknown_outcome() -> None:
    assert UnknownOutcomeError("MAYBE").kind == "UNKNOWN_OUTCOME"


def test_duplicate_settlement() -> None:
    err = DuplicateSettlementError("MKT-1")
    assert (err.code, err.http_status) == (3006, 409)


def test_stake_errors() -> None:
    assert StakeNotPositiveError(0).kind == "STAKE_NOT_POSITIVE"
    err = StakeLimitExceededError(200, 100)
    assert err.code == 4002
    assert "200" in err.message and "100" in err.message


def test_auth_errors() -> None:
    assert InvalidCredentialsError().http_status == 401
    assert AdminRequiredError().http_status == 403


def test_internal_error_is_500() -> None:
    assert InternalError().http_status == 500


def test_codes_are_unique() -> None:
    errors = [
        InvalidCredentialsError(), AdminRequiredError(), MarketNotFoundError("m"),
        MarketClosedError("m", "s"), DeadlinePassedError("m"), InvalidStateError("m", "s", "a"),
        UnknownOutcomeError("x"), DuplicateSettlementError("m"), StakeNotPositiveError(0),
        StakeLimitExceededError(2, 1), InternalError(),
    ]
    codes = [e.code for e in errors]
    assert len(codes) == len(set(codes))


class TestResponse:
    def test_success_response(self) -> None:
        resp = success_response({"x": 1})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"x": 1}
        assert resp.request_id.startswith("req_")

    def test_success_response_keeps_request_id(self) -> None:
        assert success_response(None, "req_abc").request_id == "req_abc"

    def test_error_response_carries_kind(self) -> None:
        resp = error_response(3001, "Market not found: MKT-1", "MARKET_NOT_FOUND", "req_1")
        assert resp.code == 3001
        assert resp.data == {"kind": "MARKET_NOT_FOUND"}
        assert resp.request_id == "req_1"
