"""FastAPI dependencies: get_current_bettor / require_admin.

Usage in any protected router:
    from src.wb_gateway.auth.dependencies import get_current_bettor

    @router.post("/stakes")
    async def place(bettor_id: Annotated[str, Depends(get_current_bettor)]):
        ...
"""

from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.wb_common.errors import AdminRequiredError, InvalidCredentialsError
from src.wb_gateway.auth.jwt_handler import ROLE_ADMIN, decode_token

_bearer = HTTPBearer(auto_error=False)


async def get_token_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> dict[str, Any]:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise InvalidCredentialsError()
    return decode_token(credentials.credentials)


async def get_current_bettor(
    claims: Annotated[dict[str, Any], Depends(get_token_claims)],
) -> str:
    """The bettor id (JWT ``sub``): a wallet address or account id."""
    return str(claims["sub"])


async def require_admin(
    claims: Annotated[dict[str, Any], Depends(get_token_claims)],
) -> str:
    if claims.get("role") != ROLE_ADMIN:
        raise AdminRequiredError()
    return str(claims["sub"])
