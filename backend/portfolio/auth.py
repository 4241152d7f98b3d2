"""Admin guard for FastAPI routes.

`require_admin` extracts the bearer token from the `Authorization`
header, verifies it through `AuthService.verify` and either returns the
decoded claims or raises HTTPException(401). `optional_admin` performs
the same check without raising, for endpoints that only report the
session state.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .services import AuthService

# auto_error=False: a missing header must produce 401, not FastAPI's default.
bearer_scheme = HTTPBearer(auto_error=False)


def _claims_from(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[Dict[str, Any]]:
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return AuthService().verify(credentials.credentials)


def require_admin(credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme)) -> Dict[str, Any]:
    """FastAPI dependency that returns the admin token claims.

    Raises HTTPException(401) when the header is missing or the token is
    invalid, expired or not an admin token.
    """
    claims = _claims_from(credentials)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


def optional_admin(credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme)) -> Optional[Dict[str, Any]]:
    """Like `require_admin` but returns `None` instead of raising."""
    return _claims_from(credentials)
