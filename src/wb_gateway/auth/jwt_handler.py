"""JWT verification for the identity collaborator.

Tokens are issued by the identity service (account login or wallet
sign-in). Claims used here:
  sub  : bettor id (account id or wallet address), treated as opaque
  role : "bettor" (default) or "admin"
  type : must be "access"

HS256 with a shared JWT_SECRET. ``create_access_token`` exists for the
identity service and for tests; this service never logs anyone in.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.wb_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

ROLE_BETTOR = "bettor"
ROLE_ADMIN = "admin"


def create_access_token(subject: str, role: str = ROLE_BETTOR) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": subject,
        "role": role,
        "type": "access",
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token. Raises InvalidCredentialsError."""
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access" or not payload.get("sub"):
        raise InvalidCredentialsError()
    return payload
