"""
Unit tests for the principal union and UserService's current-principal accessors.
"""
from unittest.mock import MagicMock

import pytest

from app.core.errors import ShouldNotReachHere
from app.core.principal import ANONYMOUS, Anonymous, Authenticated, ensure_principal
from app.services.user_service import UserService


@pytest.fixture
def service():
    return UserService(MagicMock(), MagicMock(), MagicMock())


@pytest.fixture
def principal():
    return Authenticated(user_id=12, admin=True, token="tok-12")


class TestEnsurePrincipal:

    def test_accepts_both_variants(self, principal):
        assert ensure_principal(ANONYMOUS) is ANONYMOUS
        assert ensure_principal(principal) is principal

    @pytest.mark.parametrize("value", [None, "token", {"user_id": 1}, object()])
    def test_rejects_other_shapes(self, value):
        with pytest.raises(ShouldNotReachHere):
            ensure_principal(value)

    def test_principals_are_immutable(self, principal):
        with pytest.raises(AttributeError):
            principal.admin = False


class TestAnonymousAccessors:

    def test_anonymous_has_no_identity(self, service):
        assert service.get_current_user_id(ANONYMOUS) is None
        assert service.is_current_user_admin(ANONYMOUS) is False
        assert service.get_current_user_jwt_token(ANONYMOUS) is None
        assert service.get_current_user(ANONYMOUS) is None

    def test_any_anonymous_instance_works(self, service):
        assert service.get_current_user_id(Anonymous()) is None


class TestAuthenticatedAccessors:

    def test_returns_token_bound_values(self, service, principal):
        assert service.get_current_user_id(principal) == 12
        assert service.is_current_user_admin(principal) is True
        assert service.get_current_user_jwt_token(principal) == "tok-12"

    def test_non_admin(self, service):
        assert service.is_current_user_admin(Authenticated(user_id=1, admin=False, token="t")) is False


class TestUnknownPrincipal:

    @pytest.mark.parametrize(
        "accessor",
        ["get_current_user_id", "is_current_user_admin", "get_current_user_jwt_token", "get_current_user"],
    )
    def test_unknown_shape_is_fatal(self, service, accessor):
        with pytest.raises(ShouldNotReachHere):
            getattr(service, accessor)(object())
