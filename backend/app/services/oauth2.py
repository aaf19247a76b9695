# backend/app/services/oauth2.py
"""
OAuth2 Login Providers

Authorization-code flow against third-party identity providers. The result of a
successful callback is an OAuth2Identity, which UserService.handle_oauth2_login
links to a local user.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass
class OAuth2Identity:
    """Authenticated identity returned by a provider"""
    provider: str  # Registration id, e.g. "github"
    principal_name: str  # Stable subject at the provider
    attributes: Dict[str, Any] = field(default_factory=dict)  # Raw userinfo claims


@dataclass
class OAuth2Provider:
    """
    Static description of one OAuth2 client registration.

    user_name_attribute is the userinfo claim used as principal name
    ("id" for GitHub, "sub" for OpenID Connect providers).
    """
    registration_id: str
    client_id: str
    client_secret: str
    authorization_uri: str
    token_uri: str
    user_info_uri: str
    user_name_attribute: str
    scopes: List[str] = field(default_factory=list)
    fallback_name_attribute: Optional[str] = None  # Used when the "name" claim is empty

    @property
    def redirect_uri(self) -> str:
        return f"{settings.oauth2_redirect_base}/api/v1/auth/oauth2/{self.registration_id}/callback"

    def get_authorize_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "state": state,
        }
        return f"{self.authorization_uri}?{urlencode(params)}"

    def to_identity(self, user_info: Dict[str, Any]) -> OAuth2Identity:
        """
        Build an identity from a userinfo payload.

        Raises:
            ValueError: if the payload has no principal name attribute
        """
        principal = user_info.get(self.user_name_attribute)
        if principal is None or str(principal) == "":
            raise ValueError(
                f"{self.registration_id}: userinfo has no '{self.user_name_attribute}' attribute"
            )
        attributes = dict(user_info)
        if not attributes.get("name") and self.fallback_name_attribute:
            attributes["name"] = attributes.get(self.fallback_name_attribute)
        return OAuth2Identity(
            provider=self.registration_id,
            principal_name=str(principal),
            attributes=attributes,
        )

    async def fetch_identity(self, code: str) -> OAuth2Identity:
        """Exchange the authorization code and read userinfo"""
        async with httpx.AsyncClient(timeout=30) as client:
            # 1. Exchange code for an access token
            token_resp = await client.post(
                self.token_uri,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
                headers={"Accept": "application/json"},
            )
            token_resp.raise_for_status()
            access_token = token_resp.json()["access_token"]

            # 2. Fetch user info
            user_resp = await client.get(
                self.user_info_uri,
                headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
            )
            user_resp.raise_for_status()
            user_info = user_resp.json()

        identity = self.to_identity(user_info)
        logger.info("[OAuth2] %s authenticated principal %s", self.registration_id, identity.principal_name)
        return identity


def load_providers() -> Dict[str, OAuth2Provider]:
    """Providers with both client id and secret configured"""
    providers: Dict[str, OAuth2Provider] = {}
    if settings.github_client_id and settings.github_client_secret:
        providers["github"] = OAuth2Provider(
            registration_id="github",
            client_id=settings.github_client_id,
            client_secret=settings.github_client_secret,
            authorization_uri="https://github.com/login/oauth/authorize",
            token_uri="https://github.com/login/oauth/access_token",
            user_info_uri="https://api.github.com/user",
            user_name_attribute="id",
            scopes=["read:user"],
            fallback_name_attribute="login",
        )
    if settings.google_client_id and settings.google_client_secret:
        providers["google"] = OAuth2Provider(
            registration_id="google",
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            authorization_uri="https://accounts.google.com/o/oauth2/v2/auth",
            token_uri="https://oauth2.googleapis.com/token",
            user_info_uri="https://openidconnect.googleapis.com/v1/userinfo",
            user_name_attribute="sub",
            scopes=["openid", "profile", "email"],
            fallback_name_attribute="email",
        )
    return providers


oauth2_providers = load_providers()
