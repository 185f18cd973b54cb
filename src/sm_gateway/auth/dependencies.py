"""FastAPI dependencies: get_current_principal / get_current_user_id / require_service_role.

Usage in any protected router:
    from src.sm_gateway.auth.dependencies import get_current_user_id

    @router.get("/protected")
    async def protected(user_id: Annotated[str, Depends(get_current_user_id)]):
        ...

Identity is owned by Supabase; nothing here touches the database.
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.sm_common.errors import InvalidCredentialsError, ServiceRoleRequiredError
from src.sm_gateway.auth.jwt_handler import (
    ROLE_AUTHENTICATED,
    ROLE_SERVICE,
    decode_access_token,
)

# auto_error=False: a missing header must be 401, not FastAPI's default
_bearer_scheme = HTTPBearer(auto_error=False)

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


@dataclass(frozen=True)
class Principal:
    user_id: str | None
    role: str

    @property
    def is_service(self) -> bool:
        return self.role == ROLE_SERVICE


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> Principal:
    """Validate the Bearer token and return who is calling.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        payload = decode_access_token(credentials.credentials)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    role = str(payload.get("role") or ROLE_AUTHENTICATED)
    user_id = payload.get("sub")
    if not user_id and role != ROLE_SERVICE:
        raise _CREDENTIALS_EXCEPTION
    return Principal(user_id=str(user_id) if user_id else None, role=role)


async def get_current_user_id(
    principal: Principal = Depends(get_current_principal),
) -> str:
    """The caller's user id; every points operation is scoped to it."""
    if principal.user_id is None:
        raise _CREDENTIALS_EXCEPTION
    return principal.user_id


async def require_service_role(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Gate operator endpoints (integrity checks) on Supabase's service role."""
    if not principal.is_service:
        raise ServiceRoleRequiredError()
    return principal
