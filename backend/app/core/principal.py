# app/core/principal.py
"""
Per-request principal.

A principal is either Anonymous or Authenticated; nothing else is legal. It is
built once per request by the API dependency (see api/v1/deps.py) and passed
explicitly to the service layer.
"""
from dataclasses import dataclass
from typing import Union

from app.core.errors import ShouldNotReachHere


@dataclass(frozen=True)
class Anonymous:
    """Caller without credentials."""


@dataclass(frozen=True)
class Authenticated:
    """Caller holding a valid access token."""
    user_id: int
    admin: bool
    token: str


Principal = Union[Anonymous, Authenticated]

ANONYMOUS = Anonymous()


def ensure_principal(value: object) -> Principal:
    """
    Validate that a value is one of the two principal variants.

    Raises:
        ShouldNotReachHere: for any other shape
    """
    if isinstance(value, (Anonymous, Authenticated)):
        return value
    raise ShouldNotReachHere(f"unexpected principal type: {type(value).__name__}")
