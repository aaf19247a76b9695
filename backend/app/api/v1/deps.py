# app/api/v1/deps.py
import jwt
from fastapi import Depends, Header, HTTPException, Request, status
from app.core.principal import ANONYMOUS, Authenticated, Principal, ensure_principal
from app.core.security import token_service
from app.services.user_service import UserService, user_service

def get_user_service() -> UserService:
    """FastAPI dependency returning the shared UserService (overridable in tests)."""
    return user_service

async def get_principal(
    request: Request,
    authorization: str | None = Header(default=None),
) -> Principal:
    """
    FastAPI dependency that builds the principal for the current request.

    The token is read from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (accessToken) - fallback method

    Returns:
        Anonymous when no token is presented, Authenticated otherwise

    Raises:
        HTTPException (401): If a token is presented but invalid or expired (AUTH_INVALID_TOKEN)
    """
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie: accessToken
    if not token:
        token = request.cookies.get("accessToken")

    if not token:
        return ANONYMOUS

    try:
        principal = token_service.parse(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")
    return ensure_principal(principal)

async def require_login(principal: Principal = Depends(get_principal)) -> Authenticated:
    """
    FastAPI dependency rejecting anonymous callers.

    Raises:
        HTTPException (401): If no token was presented (AUTH_REQUIRED)
    """
    if not isinstance(principal, Authenticated):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_REQUIRED")
    return principal

async def require_admin(
    principal: Authenticated = Depends(require_login),
    users: UserService = Depends(get_user_service),
) -> Authenticated:
    """
    FastAPI dependency to ensure the current user is an administrator.

    Raises:
        HTTPException (403): If user is not an admin (FORBIDDEN_ADMIN_ONLY)
        HTTPException (401): If user is not authenticated (from require_login)
    """
    if not users.is_current_user_admin(principal):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="FORBIDDEN_ADMIN_ONLY")
    return principal
