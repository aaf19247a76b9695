# app/core/errors.py
"""
Error types raised by the account service.

ServiceError subclasses are user-facing validation failures: the API layer turns
them into the standard {"success": False, "error": {...}} envelope with the
matching HTTP status. ShouldNotReachHere signals a broken internal contract and
is never converted into a client error.
"""
from fastapi import status


class ServiceError(Exception):
    """Base class for recoverable, user-facing errors."""

    code: str = "SERVICE_ERROR"
    message: str = "Service error"
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class UserNotFound(ServiceError):
    code = "USER_NOT_FOUND"
    message = "User not found"
    status_code = status.HTTP_404_NOT_FOUND


class IncorrectPassword(ServiceError):
    code = "INCORRECT_PASSWORD"
    message = "Incorrect password"
    status_code = status.HTTP_401_UNAUTHORIZED


class UsernameExists(ServiceError):
    code = "USERNAME_EXISTS"
    message = "Username already exists"
    status_code = status.HTTP_409_CONFLICT


class MissingClaim(ServiceError):
    code = "MISSING_CLAIM"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, claim: str):
        self.claim = claim
        super().__init__(f"External identity is missing required claim '{claim}'")


class InvalidSensitiveData(ServiceError):
    code = "INVALID_SENSITIVE_DATA"
    message = "Encrypted field could not be decrypted"
    status_code = status.HTTP_400_BAD_REQUEST


class ShouldNotReachHere(RuntimeError):
    """Raised when an internal invariant is violated (e.g. an unknown principal shape)."""

    def __init__(self, detail: str = "should not reach here"):
        super().__init__(detail)
