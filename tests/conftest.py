"""Shared pytest fixtures: an in-memory storefront API and clients wired to it."""

from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlsplit

import pytest
import requests

from storefront.app import create_app
from storefront.client import create_storefront
from storefront.common.config import AppConfig
from storefront.config import StorefrontConfig
from storefront.services import MemoryTokenStore

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"
USER_EMAIL = "jane@example.com"
USER_PASSWORD = "secret123"


class FlaskResponse:
    """The slice of requests.Response that ApiClient reads."""

    def __init__(self, response) -> None:
        self.status_code = response.status_code
        self.content = response.data
        self._json = response.get_json(silent=True)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("response body is not JSON")
        return self._json


class FlaskTransport:
    """Routes ApiClient calls into a Flask test client.

    `fail_on` maps (method, path) to an exception to raise instead, which is
    how tests simulate network trouble.
    """

    def __init__(self, app) -> None:
        self._client = app.test_client()
        self.calls = []
        self.fail_on = {}
        self.before: Optional[Callable[[str, str], None]] = None

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append((method, path))
        if self.before is not None:
            self.before(method, path)
        failure = self.fail_on.get((method, path))
        if failure is not None:
            raise failure
        response = self._client.open(
            path,
            method=method,
            json=json,
            query_string={k: str(v) for k, v in (params or {}).items()},
            headers={k: v for k, v in (headers or {}).items() if v is not None},
        )
        return FlaskResponse(response)


@pytest.fixture
def app_config():
    return AppConfig(
        database_url="sqlite://",
        secret_key="test-secret",
        log_level="INFO",
        currency="USD",
        token_ttl_seconds=3600,
        free_shipping_threshold=Decimal("50.00"),
        flat_shipping_rate=Decimal("5.99"),
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def app(app_config):
    app = create_app(app_config)
    app.config["TESTING"] = True
    yield app
    app.extensions["storefront_components"]["engine"].dispose()


@pytest.fixture
def api(app):
    """Flask test client for the storefront API."""
    return app.test_client()


@pytest.fixture
def auth_service(app):
    return app.extensions["storefront_components"]["auth_service"]


@pytest.fixture
def registered_user(auth_service):
    return auth_service.register(username="jane", email=USER_EMAIL, password=USER_PASSWORD)


@pytest.fixture
def transport(app):
    return FlaskTransport(app)


@pytest.fixture
def tokens():
    return MemoryTokenStore()


@pytest.fixture
def storefront(transport, tokens, tmp_path: Path):
    config = StorefrontConfig(api_base_url="http://storefront.test", request_timeout=5, data_dir=tmp_path)
    sf = create_storefront(config, token_store=tokens, http=transport)
    yield sf
    sf.close()


@pytest.fixture
def signed_in(storefront, registered_user):
    storefront.auth.authenticate(USER_EMAIL, USER_PASSWORD)
    return storefront


def network_down() -> requests.exceptions.ConnectionError:
    return requests.exceptions.ConnectionError("connection refused")
