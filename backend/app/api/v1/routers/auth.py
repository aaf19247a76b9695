# app/api/v1/routers/auth.py
import logging
import secrets

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from tortoise.exceptions import DoesNotExist

from app.api.v1.deps import get_principal, get_user_service, require_admin, require_login
from app.config import settings
from app.core.principal import Authenticated, Principal
from app.schemas.auth import LoginRequest, RegisterRequest
from app.services.oauth2 import oauth2_providers
from app.services.user_service import UserService

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/auth", tags=["auth"])

OAUTH2_STATE_COOKIE = "oauth2State"

class CreateUserIn(RegisterRequest):
    admin: bool = False

def _token_response(response: Response, principal: Authenticated) -> dict:
    """Set the accessToken cookie and build the standard login payload."""
    response.set_cookie("accessToken", principal.token, httponly=True, secure=False, samesite="lax")
    return {"success": True, "data": {"user": {"id": principal.user_id, "admin": principal.admin},
                                      "accessToken": principal.token}}

@router.get("/public-key")
async def public_key(users: UserService = Depends(get_user_service)):
    """
    Return the RSA public key clients must use to encrypt password fields.

    Returns:
        dict: {"success": True, "data": {"publicKey": "<PEM>"}}
    """
    return {"success": True, "data": {"publicKey": users.sensitive_data.public_key_pem()}}

@router.post("/login")
async def login(payload: LoginRequest, response: Response, users: UserService = Depends(get_user_service)):
    """
    Authenticate with username and encrypted password.

    The access token is returned in the body and also set as an HttpOnly
    cookie named "accessToken".

    Error codes (via the ServiceError handler):
        - USER_NOT_FOUND (404)
        - INCORRECT_PASSWORD (401)
        - INVALID_SENSITIVE_DATA (400): password was not encrypted with our key
    """
    principal = await users.login(payload.username, payload.password)
    return _token_response(response, principal)

@router.post("/register")
async def register(body: RegisterRequest, users: UserService = Depends(get_user_service)):
    """
    Self-service registration. Always creates a regular (non-admin) user.

    Error codes:
        - BAD_REQUEST: Missing name, username or password
        - REGISTRATION_DISABLED (403): ALLOW_REGISTRATION is off
        - USERNAME_EXISTS (409)
    """
    if not settings.allow_registration:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail={"code": "REGISTRATION_DISABLED", "message": "Registration is disabled"})
    # Basic validation, avoid pydantic error becoming 500
    if not body.name or not body.username or not body.password:
        return {"success": False, "error": {"code": "BAD_REQUEST", "message": "name/username/password required"}}
    await users.register(body.name, body.username, body.password, admin=False)
    return {"success": True, "data": {"username": body.username}}

@router.post("/users", dependencies=[Depends(require_admin)])
async def create_user(body: CreateUserIn, users: UserService = Depends(get_user_service)):
    """
    Create a user as an administrator; unlike /register this may grant admin
    and works even when public registration is disabled.
    """
    await users.register(body.name, body.username, body.password, admin=body.admin)
    return {"success": True, "data": {"username": body.username, "admin": body.admin}}

@router.get("/me")
async def me(principal: Authenticated = Depends(require_login), users: UserService = Depends(get_user_service)):
    """
    Get current authenticated user information.

    Raises:
        HTTPException (401): AUTH_REQUIRED for anonymous callers,
            AUTH_USER_NOT_FOUND if the token refers to a deleted user
    """
    try:
        user = await users.get_current_user(principal)
    except DoesNotExist:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_USER_NOT_FOUND")
    return {"success": True, "data": {"id": users.get_current_user_id(principal),
                                      "name": user.name,
                                      "admin": users.is_current_user_admin(principal)}}

@router.get("/token")
async def current_token(principal: Principal = Depends(get_principal), users: UserService = Depends(get_user_service)):
    """
    Echo the caller's token (null for anonymous callers). Used by the frontend
    to pick up a token that was delivered as a cookie.
    """
    return {"success": True, "data": {"accessToken": users.get_current_user_jwt_token(principal)}}

@router.post("/logout")
async def logout(response: Response):
    """
    Log out by clearing the access token cookie.

    Note:
        The JWT itself remains valid until it expires.
    """
    response.delete_cookie("accessToken")
    return {"success": True}

# ------------------------------------------------------------------------------
# OAuth2 login
# ------------------------------------------------------------------------------
def _get_provider(provider: str):
    p = oauth2_providers.get(provider)
    if p is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="OAUTH2_PROVIDER_NOT_FOUND")
    return p

@router.get("/oauth2/providers")
async def list_oauth2_providers():
    return {"success": True, "data": {"providers": sorted(oauth2_providers)}}

@router.get("/oauth2/{provider}/login")
async def oauth2_login(provider: str):
    """
    Redirect the browser to the provider's authorization page.
    A random state is stored in a short-lived cookie and checked on callback.
    """
    p = _get_provider(provider)
    state = secrets.token_urlsafe(24)
    redirect = RedirectResponse(p.get_authorize_url(state), status_code=status.HTTP_302_FOUND)
    redirect.set_cookie(OAUTH2_STATE_COOKIE, state, max_age=600, httponly=True, secure=False, samesite="lax")
    return redirect

@router.get("/oauth2/{provider}/callback")
async def oauth2_callback(
    provider: str,
    request: Request,
    response: Response,
    code: str = Query(...),
    state: str = Query(...),
    users: UserService = Depends(get_user_service),
):
    """
    Finish the authorization-code flow and log the external identity in.

    Raises:
        HTTPException (400): OAUTH2_STATE_MISMATCH
        HTTPException (502): OAUTH2_EXCHANGE_FAILED if the provider rejects the code
    """
    p = _get_provider(provider)
    expected = request.cookies.get(OAUTH2_STATE_COOKIE)
    if not expected or not secrets.compare_digest(expected, state):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="OAUTH2_STATE_MISMATCH")

    try:
        identity = await p.fetch_identity(code)
    except (httpx.HTTPError, KeyError, ValueError) as exc:
        logger.warning("[OAuth2] %s code exchange failed: %s", provider, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="OAUTH2_EXCHANGE_FAILED")

    principal = await users.handle_oauth2_login(identity)
    response.delete_cookie(OAUTH2_STATE_COOKIE)
    return _token_response(response, principal)
