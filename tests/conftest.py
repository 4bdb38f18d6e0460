"""Shared fixtures: an API app wired to a throwaway record store"""

import pytest
from fastapi.testclient import TestClient

from jobtracker.ui.api.config import APISettings
from jobtracker.ui.api.database import TrackerDatabase
from jobtracker.ui.api.dependencies import get_auth_service, get_db
from jobtracker.ui.api.main import app as api_app
from jobtracker.ui.api.security import JwtService, PasswordHasher
from jobtracker.ui.api.services import AuthService

TEST_PASSWORD = "secret123"


@pytest.fixture
def api_settings(tmp_path):
    return APISettings(
        database_path=str(tmp_path / "tracker.db"),
        jwt_secret_key="test-secret",
        public_base_url="http://testserver",
        smtp_host=None,
    )


@pytest.fixture
def db(tmp_path):
    return TrackerDatabase(tmp_path / "tracker.db")


@pytest.fixture
def auth_service(db, api_settings):
    # Minimum bcrypt cost keeps the suite fast
    return AuthService(
        db,
        settings=api_settings,
        hasher=PasswordHasher(rounds=4),
        jwt_service=JwtService(api_settings),
    )


@pytest.fixture
def app(db, auth_service):
    api_app.dependency_overrides[get_db] = lambda: db
    api_app.dependency_overrides[get_auth_service] = lambda: auth_service
    yield api_app
    api_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register an account through the API, returns the auth response body"""
    def _register(email="ada@example.com", name="Ada Lovelace", password=TEST_PASSWORD) -> dict:
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _register


@pytest.fixture
def auth_header():
    def _auth_header(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}
    return _auth_header


@pytest.fixture
def password():
    """Password used by the ``register`` fixture"""
    return TEST_PASSWORD
