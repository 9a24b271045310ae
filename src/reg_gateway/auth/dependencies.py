"""FastAPI dependency: get_current_caller.

Usage in any mutating router:
    from src.reg_gateway.auth.dependencies import get_current_caller

    @router.post("/something")
    async def something(caller: Annotated[str, Depends(get_current_caller)]):
        ...
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.reg_common.codecs import normalize_address
from src.reg_common.errors import InvalidAddressError, InvalidCredentialsError
from src.reg_gateway.auth.jwt_handler import decode_token

# Tokens are operator-issued; there is no login endpoint
bearer_scheme = HTTPBearer(auto_error=False)

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_caller(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Return the checksummed address the bearer token was issued for.

    The address is also stored on request.state for the request log.
    Raises HTTP 401 if the token is missing, invalid, expired, or its
    subject is not an address.
    """
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        payload = decode_token(credentials.credentials)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    subject = payload.get("sub")
    if not subject:
        raise _CREDENTIALS_EXCEPTION
    try:
        caller = normalize_address(subject)
    except InvalidAddressError:
        raise _CREDENTIALS_EXCEPTION from None
    request.state.caller = caller
    return caller
