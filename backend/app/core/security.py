# app/core/security.py
"""
Security module for authentication and authorization.
Handles password hashing and JWT token creation/validation.
"""
import os
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext
from dotenv import load_dotenv
from pathlib import Path

from app.core.principal import Authenticated

# Load environment variables from project root
ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

# Password hashing context
# Argon2 is a modern, secure password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

# JWT configuration
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret")  # Secret key for JWT signing (use strong secret in production)
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))  # Token expiration time in minutes
JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)

def create_access_token(user_id: int, admin: bool, name: str | None = None) -> str:
    """
    Create a JWT access token for user authentication.

    The token carries the user ID and admin flag so the API layer can rebuild
    the request principal without a database query.

    Token payload includes:
        - sub: Subject (user ID, as string)
        - admin: Administrator flag
        - name: Display name (informational)
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": str(user_id),  # PyJWT requires a string subject
        "admin": bool(admin),
        "name": name,
        "iat": now,
        "exp": now + dt.timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)

def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])


class TokenService:
    """Issues access tokens for users and turns presented tokens back into principals."""

    def issue(self, user) -> Authenticated:
        token = create_access_token(user.id, user.admin, user.name)
        return Authenticated(user_id=user.id, admin=user.admin, token=token)

    def parse(self, token: str) -> Authenticated:
        """
        Raises:
            jwt.InvalidTokenError: If the token is invalid, expired or lacks a subject
        """
        payload = decode_access_token(token)
        sub = payload.get("sub")
        if sub is None:
            raise jwt.InvalidTokenError("token has no subject")
        try:
            user_id = int(sub)
        except ValueError as exc:
            raise jwt.InvalidTokenError("token subject is not a user id") from exc
        return Authenticated(user_id=user_id, admin=bool(payload.get("admin", False)), token=token)


token_service = TokenService()
