"""
Test suite for health endpoints.

System role: Verification of liveness and chunk store checks
"""

import pytest
from fastapi.testclient import TestClient

from reading_room.api.deps import get_chunk_store
from reading_room.api.main import create_app

from tests.fakes import FakeChunkStore, build_chunk


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


def test_health_check(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(app, client):
    app.dependency_overrides[get_chunk_store] = lambda: FakeChunkStore(chunks=[build_chunk("a"), build_chunk("b")])

    response = client.get("/api/v1/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK (2 chunks)"}


def test_health_check_db_unavailable(app, client):
    app.dependency_overrides[get_chunk_store] = lambda: FakeChunkStore(failing={"count"})

    response = client.get("/api/v1/health/db")

    assert response.status_code == 503
    assert response.json()["detail"] == "Database unavailable"
