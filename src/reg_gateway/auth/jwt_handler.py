"""JWT access tokens that identify the caller address of a mutating request.

The token subject is the checksummed address the request acts as — the
transaction originator (``caller`` of direct calls, ``sender`` of delegated
ones). Tokens are issued by the operator with ``create_access_token``; the
service itself never issues them.

MVP NOTE: Using HS256 (symmetric HMAC) and no revocation. Once issued, tokens
are valid until expiry.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.reg_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(address: str, expires_in: timedelta | None = None) -> str:
    """Issue an access token for ``address`` (default lifetime: 30 min)."""
    now = datetime.now(UTC)
    payload = {
        "sub": address,
        "type": "access",
        "iat": now,
        "exp": now + (expires_in or _ACCESS_EXPIRE),
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: signature invalid, token expired, or wrong type.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    return payload
