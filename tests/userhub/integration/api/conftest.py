"""Fixtures for API tests.

The app runs on the in-memory credential store with bcrypt at its lowest
cost factor. Outbound email is recorded and the image store is mocked.
"""

import re
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from userhub.presentation.api.app import create_app
from userhub.presentation.api.dependencies import get_mailer
from userhub_config.settings import Settings

SERVER_BASE_URL = "http://testserver"
_RESET_LINK_RE = re.compile(
    re.escape(SERVER_BASE_URL) + r"/user/resetpassword/([0-9a-f]+)"
)

REGISTRATION = {
    "name": "Jane Doe",
    "userName": "jane.doe",
    "gender": "Female",
    "email": "jane@example.com",
    "phone": "9898989898",
    "password": "Password1!",
}


class RecordingMailer:
    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []
        self.fail_with: Exception | None = None

    def send(self, to_address: str, subject: str, html_body: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((to_address, subject, html_body))

    def last_reset_token(self) -> str:
        match = _RESET_LINK_RE.search(self.sent[-1][2])
        assert match is not None
        return match.group(1)


@pytest.fixture
def api_settings():
    return Settings(
        jwt_secret_key=SecretStr("api-test-secret-key"),
        store_backend="memory",
        password_hash_rounds=4,
        smtp_enabled=False,
        server_base_url=SERVER_BASE_URL,
        log_level="WARNING",
    )


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def app(api_settings, mailer):
    app = create_app(api_settings)
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.state.image_store = Mock()
    return app


@pytest.fixture
def client(app):
    """Test client that renders unexpected errors as 500 responses."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def registered(client):
    """Register the default account and return the response body."""
    response = client.post("/user", json=REGISTRATION)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(registered):
    return {"Authorization": f"Bearer {registered['token']}"}


@pytest.fixture
def registration():
    """A valid registration payload."""
    return dict(REGISTRATION)
