"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from batepapo.app import create_app
from batepapo.config import Settings


@pytest.fixture(scope="function")
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Ensure tests run with a clean environment (no leftover vars)."""
    for var in [
        "MONGODB_URI", "DATABASE_URL", "MONGODB_DB", "BATEPAPO_STALE_AFTER_MS",
        "BATEPAPO_SWEEP_INTERVAL", "BATEPAPO_CORS_ORIGINS", "BATEPAPO_LOG_LEVEL",
        "HOST", "PORT",
    ]:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(scope="function")
def settings(clean_env) -> Settings:
    return Settings()


@pytest.fixture(scope="function")
def db():
    """Fresh in-memory database per test."""
    return AsyncMongoMockClient()["batepapo_test"]


@pytest.fixture(scope="function")
def client(settings: Settings, db) -> TestClient:
    app = create_app(settings=settings, db=db, start_sweeper=False)
    return TestClient(app)
