"""Supabase access-token verification.

Supabase Auth signs access tokens with the project's JWT secret (HS256).
Claims used here:
  - sub:  the user's UUID, used as the opaque user_id for the ledger
  - role: "authenticated" for patrons/owners, "service_role" for backend/operator keys
  - aud:  "authenticated" on user tokens; service-role keys carry no aud

create_access_token mints tokens with the same shape for local development and
tests. Production tokens are always issued by Supabase, never by this service.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.sm_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

ROLE_AUTHENTICATED = "authenticated"
ROLE_SERVICE = "service_role"


def create_access_token(user_id: str, role: str = ROLE_AUTHENTICATED) -> str:
    """Issue a Supabase-shaped access token (dev/test only)."""
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "role": role,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm=_ALGORITHM))


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature, expiry and audience; return the claims.

    Raises:
        InvalidCredentialsError: any verification failure.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
            audience=settings.JWT_AUDIENCE,
        )
    except JWTError:
        raise InvalidCredentialsError() from None
    return payload
