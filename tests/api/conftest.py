"""Fixtures for HTTP-level tests against the full application."""

import pytest
from fastapi.testclient import TestClient

from src.api import dependencies
from src.config.settings import get_settings
from src.main import create_app


@pytest.fixture
def app():
    get_settings.cache_clear()
    dependencies.reset_shared_clients()
    app = create_app()
    yield app
    app.dependency_overrides.clear()
    dependencies.reset_shared_clients()


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as client:
        yield client


@pytest.fixture
def admin(client) -> TestClient:
    """A client holding a valid admin session cookie."""
    response = client.post(
        "/api/auth/login",
        json={"email": "admin@example.com", "password": "correct horse"},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def email_client(app):
    """The shared mock email client the app sends through."""
    return dependencies.get_email_client(get_settings())


@pytest.fixture
def storage_client(app):
    return dependencies.get_storage_client(get_settings())
