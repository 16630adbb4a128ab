"""Shared pytest fixtures: every test gets its own in-memory SQLite store."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from topomap.db import create_session_factory, create_store_engine
from topomap.main import create_app
from topomap.services.repository import TopologyRepository
from topomap.services.schema import ensure_schema


@pytest.fixture(scope="function")
def test_engine():
    engine = create_store_engine("sqlite://")
    ensure_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db(test_engine):
    session = create_session_factory(test_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def repo(test_db) -> TopologyRepository:
    return TopologyRepository(test_db)


@pytest.fixture(scope="function")
def test_client():
    app = create_app("sqlite://")
    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_device(test_client):
    def _make(name="SW1", type="switch", **extra):
        res = test_client.post("/api/devices", json={"name": name, "type": type, **extra})
        assert res.status_code == 201, res.text
        return res.json()
    return _make


@pytest.fixture
def make_link(test_client):
    def _make(from_id, to_id, **extra):
        res = test_client.post("/api/links", json={"fromId": from_id, "toId": to_id, **extra})
        assert res.status_code == 201, res.text
        return res.json()
    return _make
