# backend/app/services/user_service.py
"""
User Service

Login, OAuth2 login, registration and current-principal accessors.
Password hashing, token signing and field decryption are delegated to the
collaborators passed to the constructor; persistence goes through Tortoise.
"""
import logging
from typing import Optional

from passlib.context import CryptContext
from tortoise.exceptions import IntegrityError
from tortoise.queryset import QuerySetSingle
from tortoise.transactions import in_transaction

from app.core.errors import (
    IncorrectPassword,
    MissingClaim,
    ShouldNotReachHere,
    UserNotFound,
    UsernameExists,
)
from app.core.principal import Anonymous, Authenticated, Principal
from app.core.security import TokenService, pwd_context, token_service
from app.core.sensitive import SensitiveDataService, sensitive_data_service
from app.models.external_login_data import ExternalLoginData, ExternalLoginMethod
from app.models.login_data import LoginData
from app.models.user import User
from app.services.oauth2 import OAuth2Identity

logger = logging.getLogger(__name__)


class UserService:
    """
    Account operations.

    The multi-row writes (user + credential) run inside a single transaction.
    Uniqueness of usernames and external identities is guaranteed by the
    database constraints; the checks done here only produce a clearer error.
    """

    def __init__(
        self,
        encoder: CryptContext,
        sensitive_data: SensitiveDataService,
        tokens: TokenService,
    ):
        self.encoder = encoder
        self.sensitive_data = sensitive_data
        self.tokens = tokens

    async def login(self, username: str, password: str) -> Authenticated:
        """
        Authenticate with username and a transport-encrypted password.

        Raises:
        - UserNotFound: no local credential with this username
        - IncorrectPassword: password does not match the stored hash
        """
        login_data = await LoginData.get_or_none(username=username).prefetch_related("user")
        if login_data is None:
            logger.info("[Auth] Login failed, unknown username %s", username)
            raise UserNotFound()

        if not self.encoder.verify(self.sensitive_data.decrypt(password), login_data.password_hash):
            logger.info("[Auth] Login failed, incorrect password for %s", username)
            raise IncorrectPassword()

        logger.info("[Auth] User %s logged in", login_data.user.id)
        return self.tokens.issue(login_data.user)

    async def handle_oauth2_login(self, identity: OAuth2Identity) -> Authenticated:
        """
        Log in with an external identity, creating and linking a user on first sight.

        Raises:
        - MissingClaim: first login and the identity carries no display name
        """
        existing = await self._find_external(identity)
        if existing is not None:
            return self.tokens.issue(existing.user)

        name = identity.attributes.get("name")
        if name is None or not str(name).strip():
            raise MissingClaim("name")

        try:
            async with in_transaction() as conn:
                user = await User.create(name=str(name), admin=False, using_db=conn)
                await ExternalLoginData.create(
                    user=user,
                    method=ExternalLoginMethod.OAUTH2,
                    provider=identity.provider,
                    principal_name=identity.principal_name,
                    using_db=conn,
                )
        except IntegrityError:
            # A concurrent first login linked the same identity; use that user
            existing = await self._find_external(identity)
            if existing is None:
                raise
            return self.tokens.issue(existing.user)

        logger.info(
            "[Auth] Linked %s principal %s to new user %s",
            identity.provider, identity.principal_name, user.id,
        )
        return self.tokens.issue(user)

    async def register(self, name: str, username: str, password: str, admin: bool) -> None:
        """
        Create a user with a local credential.

        Raises:
        - UsernameExists: username already taken (including a concurrent registration)
        """
        if await LoginData.filter(username=username).exists():
            raise UsernameExists()

        password_hash = self.encoder.hash(self.sensitive_data.decrypt(password))

        try:
            async with in_transaction() as conn:
                user = await User.create(name=name, admin=admin, using_db=conn)
                await LoginData.create(
                    user=user,
                    username=username,
                    password_hash=password_hash,
                    using_db=conn,
                )
        except IntegrityError as exc:
            raise UsernameExists() from exc

        logger.info("[Auth] Registered user %s (username=%s, admin=%s)", user.id, username, admin)

    # -------- current principal accessors --------
    def get_current_user_id(self, principal: Principal) -> Optional[int]:
        if isinstance(principal, Authenticated):
            return principal.user_id
        if isinstance(principal, Anonymous):
            return None
        raise ShouldNotReachHere()

    def is_current_user_admin(self, principal: Principal) -> bool:
        if isinstance(principal, Authenticated):
            return principal.admin
        if isinstance(principal, Anonymous):
            return False
        raise ShouldNotReachHere()

    def get_current_user_jwt_token(self, principal: Principal) -> Optional[str]:
        if isinstance(principal, Authenticated):
            return principal.token
        if isinstance(principal, Anonymous):
            return None
        raise ShouldNotReachHere()

    def get_current_user(self, principal: Principal) -> Optional[QuerySetSingle[User]]:
        """
        Lazy reference to the current user.

        The returned query runs when awaited and raises DoesNotExist if the
        token refers to a user that no longer exists.
        """
        if isinstance(principal, Authenticated):
            return User.get(id=principal.user_id)
        if isinstance(principal, Anonymous):
            return None
        raise ShouldNotReachHere()

    async def _find_external(self, identity: OAuth2Identity) -> Optional[ExternalLoginData]:
        return await ExternalLoginData.get_or_none(
            method=ExternalLoginMethod.OAUTH2,
            provider=identity.provider,
            principal_name=identity.principal_name,
        ).prefetch_related("user")


user_service = UserService(pwd_context, sensitive_data_service, token_service)
