"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncIterator, Generator

import pytest
from fastapi.testclient import TestClient

from src.core.config import settings
from src.core.db_client import InstanceStore
from src.main import app


@pytest.fixture
async def store(tmp_path) -> AsyncIterator[InstanceStore]:
    """Provides a connected InstanceStore backed by a temporary SQLite file."""
    instance_store = InstanceStore(db_path=str(tmp_path / "tender_test.db"))
    await instance_store.connect()
    yield instance_store
    await instance_store.close()


@pytest.fixture
def client(tmp_path, monkeypatch) -> Generator[TestClient]:
    """Provides a TestClient whose lifespan opens a temporary database."""
    monkeypatch.setattr(settings, "sqlite_db_path", str(tmp_path / "tender_api.db"))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sync_id() -> str:
    return "test-sync-code"
