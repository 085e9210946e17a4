import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .models import Role
from .schemas import TokenClaims
from .security_utils import decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401 by us, not 403 by Starlette
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenClaims:
    """Verify the bearer token and return its decoded claims.

    The claims are not re-read from the database, so role or name changes only
    show up once a new token is issued.
    """
    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=401, detail="No token provided")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(status_code=403, detail="Invalid or expired token")

    try:
        return TokenClaims.model_validate(payload)
    except ValueError as e:
        logger.warning(f"⚠️ Token with unexpected claims rejected: {e}")
        raise HTTPException(status_code=403, detail="Invalid or expired token") from e


def require_role(*roles: Role):
    """Dependency factory: allow only callers whose token role is in `roles`"""
    allowed = frozenset(roles)

    async def role_checker(current_user: TokenClaims = Depends(get_current_user)) -> TokenClaims:
        if current_user.role_enum not in allowed:
            logger.warning(
                f"🚫 User {current_user.id} with role '{current_user.role}' denied (needs {sorted(r.value for r in allowed)})"
            )
            raise HTTPException(
                status_code=403, detail="Forbidden: You do not have the required permissions."
            )
        return current_user

    return role_checker
