"""Tests for AuthSessionManager against the in-memory API."""

import pytest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, USER_EMAIL, USER_PASSWORD, network_down
from storefront.services import ApiError, AuthenticationError, Session


class TestLogin:
    def test_user_login_routes_home(self, storefront, registered_user, tokens):
        session = storefront.auth.authenticate(USER_EMAIL, USER_PASSWORD)

        assert session.user.email == USER_EMAIL
        assert session.user.role == "user"
        assert tokens.get() == session.token
        assert storefront.navigator.location == "/"
        assert storefront.notifier.last.message == "Login successful"

    def test_admin_login_routes_to_dashboard(self, storefront):
        session = storefront.auth.authenticate(ADMIN_EMAIL, ADMIN_PASSWORD)

        assert session.user.role == "admin"
        assert storefront.navigator.location == "/admin/dashboard"

    def test_bad_credentials_raise_and_notify(self, storefront, registered_user, tokens):
        with pytest.raises(AuthenticationError) as err:
            storefront.auth.authenticate(USER_EMAIL, "wrong-password")

        assert err.value.code == "INVALID_CREDENTIALS"
        assert storefront.auth.user is None
        assert tokens.get() is None
        assert storefront.notifier.last.level == "error"

    def test_register_signs_in(self, storefront):
        session = storefront.auth.register("sam", "sam@example.com", "hunter22")

        assert session.user.name == "sam"
        assert session.user.role == "user"
        assert storefront.navigator.location == "/"

    def test_login_with_known_token_skips_credentials(self, storefront, transport):
        storefront.auth.login("opaque-token", {"id": "u1", "role": "superuser", "name": "U", "email": "u@x.io"})

        assert storefront.auth.user.id == "u1"
        assert storefront.auth.user.role == "user"
        assert storefront.auth.persisted_token() == "opaque-token"
        assert ("POST", "/api/auth/login") not in transport.calls


class TestValidateToken:
    def test_no_token_leaves_session_empty(self, storefront, transport):
        session = storefront.auth.validate_token()

        assert session == Session()
        assert storefront.auth.is_loading is False
        assert transport.calls == []

    def test_valid_token_restores_user(self, storefront, auth_service, registered_user, tokens):
        tokens.set(auth_service.issue_token(registered_user))

        storefront.start()

        assert storefront.auth.user.email == USER_EMAIL
        assert storefront.auth.session.token == tokens.get()

    @pytest.mark.parametrize("token_kind", ["expired", "garbage"])
    def test_rejected_token_is_cleared(self, storefront, auth_service, registered_user, tokens, token_kind):
        token = auth_service.issue_token(registered_user, ttl_seconds=-5) if token_kind == "expired" else "garbage"
        tokens.set(token)

        storefront.auth.validate_token()

        assert storefront.auth.user is None
        assert tokens.get() is None
        assert storefront.navigator.location == "/login"

    def test_network_failure_keeps_session(self, signed_in, transport, tokens):
        token = tokens.get()
        transport.fail_on[("GET", "/api/users/profile")] = network_down()

        session = signed_in.auth.validate_token()

        assert session.user.email == USER_EMAIL
        assert tokens.get() == token
        assert signed_in.navigator.location == "/"

    def test_listeners_see_change_before_return(self, storefront, registered_user):
        seen = []
        storefront.auth.subscribe(lambda prev, curr: seen.append((prev.user, curr.user and curr.user.email)))

        storefront.auth.authenticate(USER_EMAIL, USER_PASSWORD)

        assert seen == [(None, USER_EMAIL)]


class TestLogout:
    def test_logout_clears_everything(self, signed_in, tokens):
        signed_in.catalog.list_categories()
        assert ("categories",) in signed_in.queries

        signed_in.auth.logout()

        assert signed_in.auth.user is None
        assert tokens.get() is None
        assert ("categories",) not in signed_in.queries
        assert signed_in.navigator.location == "/login"

    def test_logout_survives_network_failure(self, signed_in, transport, tokens):
        transport.fail_on[("POST", "/api/auth/logout")] = network_down()

        signed_in.auth.logout()

        assert signed_in.auth.user is None
        assert tokens.get() is None

    def test_logout_revokes_server_side(self, signed_in, tokens, api):
        token = tokens.get()

        signed_in.auth.logout()

        resp = api.get("/api/users/profile", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_server_error_on_logout_is_not_raised(self, signed_in, transport):
        transport.fail_on[("POST", "/api/auth/logout")] = ApiError("boom")

        signed_in.auth.logout()

        assert signed_in.auth.user is None
