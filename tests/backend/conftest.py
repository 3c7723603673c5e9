from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from backend.app.main import create_app

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client) -> Callable[..., dict]:
    """Register a user through the API and return the response ``data``."""

    def _register(email: str, name: str = "Test User", password: str = DEFAULT_PASSWORD) -> dict:
        resp = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        assert resp.status_code == 201, resp.text
        # Keep requests explicit: tests send the bearer header, not the cookie
        client.cookies.clear()
        return resp.json()["data"]

    return _register


@pytest.fixture
def auth_headers(register) -> Callable[..., dict]:
    """Register a user and return headers authenticating as them."""

    def _headers(email: str = "tester@example.com", name: str = "Test User") -> dict:
        data = register(email, name)
        return {"Authorization": f"Bearer {data['token']}"}

    return _headers


@pytest.fixture
def authorized_client(client, auth_headers) -> tuple[TestClient, dict]:
    return client, auth_headers()
