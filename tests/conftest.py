"""Pytest configuration and fixtures for NusaDana tests.

Provides an app wired to a throwaway SQLite database and local storage,
plus helpers for registering users and authenticating requests.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from nusadana.config import AppConfig, AuthConfig, DBConfig, StorageConfig, reset_config
from nusadana.db.connection import Database
from nusadana.web.app import create_app


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch, tmp_path: Path):
    """Set up test environment variables."""
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("NUSADANA_SESSION_FILE", str(tmp_path / "session.json"))
    for name in (
        "ENVIRONMENT",
        "JWT_SECRET",
        "SUPABASE_URL",
        "SUPABASE_KEY",
        "NUSADANA_AUTH_DISABLED",
        "NUSADANA_API_URL",
        "PORT",
        "HOST",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Config pointing at a file-backed SQLite database in tmp_path."""
    return AppConfig(
        db=DBConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'nusadana.db'}", create_tables=True),
        log_level="WARNING",
        auth=AuthConfig(jwt_secret="test-secret", bcrypt_rounds=4),
        storage=StorageConfig(local_root=tmp_path / "uploads"),
    )


@pytest.fixture
def client(app_config: AppConfig):
    """Test client with the app lifespan running."""
    with TestClient(create_app(app_config)) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def db(app_config: AppConfig):
    """Database with tables created, for repository-level tests."""
    database = Database(app_config.db)
    await database.create_all()
    yield database
    await database.dispose()


def register(
    client: TestClient,
    email: str = "siti@desa.id",
    role: str = "official",
    password: str = "rahasia123",
    name: str = "Siti",
) -> dict:
    """Register a user and return the ``{user, token}`` body."""
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_user(client: TestClient):
    """Factory registering users through the API."""

    def _register(**kwargs) -> dict:
        return register(client, **kwargs)

    return _register


@pytest.fixture
def official(client: TestClient) -> dict:
    """Registered official: ``{user, token}``."""
    return register(client)


@pytest.fixture
def auth_headers(official: dict) -> dict[str, str]:
    return bearer(official["token"])


@pytest.fixture
def make_project(client: TestClient, auth_headers: dict[str, str]):
    """Factory creating projects through the API."""

    def _make(title: str = "Jalan Desa", budget: float | None = 5_000_000, **extra) -> dict:
        body = {"title": title, "estimated_budget": budget, **extra}
        response = client.post("/api/projects", json=body, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
